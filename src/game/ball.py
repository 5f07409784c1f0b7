"""
Ball Physics
============

The ball for Neural Pong: position, velocity, wall reflection and
goal-line detection.

Each tick the caller moves the ball and gets back which goal line (if any)
the ball has reached. Exactly one handler deals with that report, so the
ball never broadcasts to multiple listeners.

Goal lines (per side):

    edge      bat      goal line
     |  30    ||   7     :
     +--------||---------:
"""

from enum import Enum
from typing import Optional

import numpy as np

from config import Config


class BallDirection(Enum):
    """Which way a newly served ball travels."""
    LEFT_TO_RIGHT = 1
    RIGHT_TO_LEFT = -1


class GoalLine(Enum):
    """Goal line reached by the ball this tick."""
    LEFT = 'left'
    RIGHT = 'right'


def clamp(value, low, high):
    """Restrict value to [low, high]."""
    return max(low, min(value, high))


class Ball:
    """
    The bouncing ball.

    Attributes:
        x, y: Position in court pixels
        dx, dy: Velocity in pixels per tick
        accel: Speed multiplier applied on every bat contact

    A ball is never reset; a new serve creates a new Ball.
    """

    def __init__(
        self,
        config: Config,
        direction: BallDirection = BallDirection.LEFT_TO_RIGHT,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Serve a new ball from the centre of the court.

        Args:
            config: Configuration object
            direction: Horizontal direction of travel
            rng: Random generator (a fresh one if None)
        """
        self.config = config
        self.width = config.SCREEN_WIDTH
        self.height = config.SCREEN_HEIGHT
        self.accel = config.BALL_ACCELERATION
        self.max_speed = config.BALL_MAX_SPEED

        rng = rng if rng is not None else np.random.default_rng()

        self.x = float(self.width // 2)
        self.y = float(self.height // 2)

        dy_low, dy_high = config.SERVE_DY_RANGE
        dx_low, dx_high = config.SERVE_DX_RANGE

        dy_sign = -1 if rng.integers(0, 2) == 1 else 1
        self.dy = int(rng.integers(dy_low, dy_high)) / 100 * dy_sign / 10
        self.dx = int(rng.integers(dx_low, dx_high)) / 100 * direction.value / 10

    @property
    def left_goal_line(self) -> float:
        """X below which the ball has reached the left bat."""
        return self.config.BAT_DISTANCE_FROM_EDGE + self.config.GOAL_LINE_MARGIN

    @property
    def right_goal_line(self) -> float:
        """X above which the ball has reached the right bat."""
        return self.width - self.config.BAT_DISTANCE_FROM_EDGE - self.config.GOAL_LINE_MARGIN

    def move(self) -> Optional[GoalLine]:
        """
        Advance the ball one tick.

        Bounces off the top and bottom walls, landing on the edge plus the
        reflected step rather than flush with it.

        Returns:
            The goal line the ball is now past, or None
        """
        self.x += self.dx
        self.y += self.dy

        if self.y < 0:
            self.dy = -self.dy
            self.y = 0 + self.dy
        elif self.y > self.height:
            self.dy = -self.dy
            self.y = self.height + self.dy

        if self.x < self.left_goal_line:
            return GoalLine.LEFT
        if self.x > self.right_goal_line:
            return GoalLine.RIGHT
        return None

    def bounce_off_bat(self, hit: int) -> None:
        """
        Return the ball after it struck a bat.

        Args:
            hit: Hit zone on the bat (-4..4); sets the return angle
        """
        # step back out of the bat
        self.x -= self.dx

        self.dx = -self.dx
        self.dy = hit / 2

        # speed up every rally
        self.dx *= self.accel
        self.dy *= self.accel

        # without this it could speed up exponentially
        self.dx = clamp(self.dx, -self.max_speed, self.max_speed)
        self.dy = clamp(self.dy, -self.max_speed, self.max_speed)
