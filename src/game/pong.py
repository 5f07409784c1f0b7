"""
Pong Court
==========

The playing court for Neural Pong: one ball, two bats and a scoreboard.

Key Features:
- Resolves goal-line arrivals into returns, points or "still in flight"
- Auto-trainer offset so the right bat rarely returns perpendicular balls
- Snapshot of everything a renderer needs, with no drawing logic here

Game Rules:
- The neural network controls the left bat
- A human (pointer) or the auto-tracker controls the right bat
- Every serve travels left to right, toward the trainer
- A ball that gets past a bat scores for the other side
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from config import Config
from .ball import Ball, BallDirection, GoalLine
from .bat import Bat, Side
from .scoreboard import ScoreBoard


class RallyOutcome(Enum):
    """What happened when the ball reached a goal line."""
    RETURNED = 'returned'     # bat hit the ball back
    SCORED = 'scored'         # ball got past the bat, point awarded
    IN_FLIGHT = 'in_flight'   # bat missed, ball not yet off the court


@dataclass(frozen=True)
class CourtSnapshot:
    """Everything a renderer needs for one frame."""
    ball_x: float
    ball_y: float
    left_bat_x: int
    left_bat_y: int
    right_bat_x: int
    right_bat_y: int
    half_bat_length: int
    left_score: int
    right_score: int
    epoch: int
    auto_mode: bool
    cursor_y: int


class Pong:
    """
    The court simulation.

    Attributes:
        ball: Current ball (replaced on every serve)
        left_bat: Bat controlled by the neural network
        right_bat: Bat controlled by the human or the auto-tracker
        scoreboard: Both players' scores
        epoch: Serves since the court was created

    Example:
        >>> court = Pong(Config())
        >>> line = court.move_ball()
        >>> if line is GoalLine.LEFT:
        ...     outcome = court.resolve_left()
    """

    def __init__(self, config: Optional[Config] = None, rng: Optional[np.random.Generator] = None):
        """
        Initialize the court and serve the first ball.

        Args:
            config: Configuration object (uses default if None)
            rng: Random generator shared by every serve (seeded from config if None)
        """
        self.config = config or Config()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.SEED)

        self.width = self.config.SCREEN_WIDTH
        self.height = self.config.SCREEN_HEIGHT

        self.left_bat = Bat(Side.LEFT, self.config)
        self.right_bat = Bat(Side.RIGHT, self.config)
        self.scoreboard = ScoreBoard()

        self.epoch = 0
        self.trainer_offset = 0
        self.ball: Ball = self._serve()

    def _serve(self) -> Ball:
        self.epoch += 1
        ball = Ball(self.config, BallDirection.LEFT_TO_RIGHT, rng=self.rng)
        self.pick_trainer_offset()
        return ball

    def new_ball(self) -> None:
        """Serve a fresh ball from the centre."""
        self.ball = self._serve()

    def pick_trainer_offset(self) -> None:
        """Choose where on its bat the auto-trainer aims to strike the next ball."""
        half = self.config.HALF_BAT_LENGTH
        self.trainer_offset = int(self.rng.integers(-half, half))

    def auto_target(self) -> int:
        """Target Y for the right bat when it tracks the ball by itself."""
        return int(self.ball.y) + self.trainer_offset

    def move_ball(self) -> Optional[GoalLine]:
        """Advance the ball; return the goal line it reached, if any."""
        return self.ball.move()

    def move_trainer_bat(self, y_target: int) -> None:
        self.right_bat.move(y_target)

    def move_ai_bat(self, y_target: int) -> None:
        self.left_bat.move(y_target)

    def resolve_left(self) -> RallyOutcome:
        """
        The ball reached the left (network) bat's goal line.

        A miss lets the ball keep travelling until it is nearly off the court,
        then the right player scores. The caller serves the next ball.
        """
        edge = self.config.BAT_DISTANCE_FROM_EDGE
        hit = self.left_bat.hit_test(round(self.ball.y))

        # missed, or the ball is already behind the bat
        if hit is None or self.ball.x < edge - 3:
            if self.ball.x > 4:
                return RallyOutcome.IN_FLIGHT

            self.scoreboard.right_player_scored()
            return RallyOutcome.SCORED

        # make sure the ball starts to the right of the left bat
        self.ball.x = edge + 4
        self.ball.bounce_off_bat(hit)

        self.pick_trainer_offset()
        return RallyOutcome.RETURNED

    def resolve_right(self) -> RallyOutcome:
        """The ball reached the right (trainer) bat's goal line."""
        edge = self.config.BAT_DISTANCE_FROM_EDGE
        hit = self.right_bat.hit_test(round(self.ball.y))

        if hit is None or self.ball.x > self.width - edge + 3:
            if self.ball.x < self.width - 4:
                return RallyOutcome.IN_FLIGHT

            self.scoreboard.left_player_scored()
            return RallyOutcome.SCORED

        self.ball.x = self.width - (edge + 7)
        self.ball.bounce_off_bat(hit)

        return RallyOutcome.RETURNED

    def is_learnable(self, y: float) -> bool:
        """True if a ball arriving at y is outside both dead zones."""
        limit = self.config.DEAD_ZONE_LIMIT
        return limit < y < self.height - limit

    def snapshot(self, auto_mode: bool = True, cursor_y: Optional[int] = None) -> CourtSnapshot:
        """Capture the court for rendering."""
        return CourtSnapshot(
            ball_x=self.ball.x,
            ball_y=self.ball.y,
            left_bat_x=self.left_bat.x,
            left_bat_y=self.left_bat.y,
            right_bat_x=self.right_bat.x,
            right_bat_y=self.right_bat.y,
            half_bat_length=self.config.HALF_BAT_LENGTH,
            left_score=self.scoreboard.left_score,
            right_score=self.scoreboard.right_score,
            epoch=self.epoch,
            auto_mode=auto_mode,
            cursor_y=cursor_y if cursor_y is not None else self.right_bat.y,
        )

