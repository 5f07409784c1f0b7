"""
Bat (Paddle) Controller
=======================

A bat sits at a fixed X on its side of the court and moves vertically
toward a target, a few pixels per tick at most.

    BAT_DISTANCE_FROM_EDGE
        X
    +---+

        ||  -+
        ||   | HALF_BAT_LENGTH
        ||   |
        ##  -+  Y
        ||
        ||
        ||
"""

from enum import Enum
from typing import Optional

from config import Config
from .ball import clamp


class Side(Enum):
    """Which side the bat is positioned."""
    LEFT = 'left'
    RIGHT = 'right'


class Bat:
    """A bat for Neural Pong (network-controlled or trainer-controlled)."""

    def __init__(self, side: Side, config: Config):
        self.side = side
        self.config = config
        self.height = config.SCREEN_HEIGHT
        self.half_length = config.HALF_BAT_LENGTH
        self.max_step = config.BAT_MAX_STEP

        self.y = config.SCREEN_HEIGHT // 2

        if side == Side.LEFT:
            self.x = config.BAT_DISTANCE_FROM_EDGE + config.BAT_THICKNESS // 2
        else:
            self.x = config.SCREEN_WIDTH - config.BAT_DISTANCE_FROM_EDGE - config.BAT_THICKNESS // 2

    @property
    def min_y(self) -> int:
        return self.config.DEAD_ZONE_LIMIT

    @property
    def max_y(self) -> int:
        return self.height - self.config.DEAD_ZONE_LIMIT

    def move(self, y_target: int) -> None:
        """
        Move the bat toward a target.

        The bat covers at most BAT_MAX_STEP pixels per call and never enters
        the dead zone, however far away the target is.
        """
        step_y = clamp(y_target, self.y - self.max_step, self.y + self.max_step)
        self.y = clamp(step_y, self.min_y, self.max_y)

    def hit_test(self, ball_y: int) -> Optional[int]:
        """
        Detect where on the bat the ball struck.

        Args:
            ball_y: Vertical position of the ball

        Returns:
            Hit zone in -4..4 (0 is dead centre), or None if the ball missed
        """
        distance = ball_y - self.y

        if abs(distance) > self.half_length:
            return None

        # bat is split into 8 zones, rounded to the nearest of 9 boundaries
        return int(round(distance / (self.half_length / 4)))
