"""
Configuration file for Neural Pong
==================================

All court dimensions, network hyperparameters, training limits and host
settings are centralized here. Modify these values to experiment with
different training configurations.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.LEARNING_RATE)
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional
import os


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Court Settings - Playing area dimensions
    2. Bat Settings - Paddle geometry and speed
    3. Ball Settings - Serve speeds and acceleration
    4. Neural Network - Architecture configuration
    5. Training - Online learning limits
    6. Training Data - Corpus persistence
    7. Host - Window, timer and display options
    8. System - Paths, logging and seeding
    """

    # =========================================================================
    # COURT SETTINGS
    # =========================================================================

    SCREEN_WIDTH: int = 800
    SCREEN_HEIGHT: int = 600

    # =========================================================================
    # BAT SETTINGS
    # =========================================================================

    # How far each bat sits from its edge of the court
    BAT_DISTANCE_FROM_EDGE: int = 30

    # Bat length is double this (drawn up this much, plus down this much)
    HALF_BAT_LENGTH: int = 16

    # Margin near the top/bottom the bat cannot reach (a ball placed here wins)
    DEAD_ZONE: int = 8

    # Drawn thickness of a bat, also offsets its X from the edge distance
    BAT_THICKNESS: int = 6

    # Maximum distance a bat may travel in a single tick
    BAT_MAX_STEP: int = 3

    # =========================================================================
    # BALL SETTINGS
    # =========================================================================

    # Speed multiplier applied on every bat contact (5% faster)
    BALL_ACCELERATION: float = 1.05

    # Hard clamp on |dx| and |dy| after a bat contact
    BALL_MAX_SPEED: float = 10.0

    # Serve speed ranges, in hundredths before the final /10 scaling
    # (dy: 0.3 - 2.5, dx: 0.9 - 2.5)
    SERVE_DY_RANGE: Tuple[int, int] = (300, 2500)
    SERVE_DX_RANGE: Tuple[int, int] = (900, 2500)

    # Goal lines sit this far inside the bat lines
    GOAL_LINE_MARGIN: int = 7

    # =========================================================================
    # NEURAL NETWORK ARCHITECTURE
    # =========================================================================

    # Layer widths including input and output:
    # 4 inputs (opponent bat y, ball y, ball dx, ball dy) -> 1 output (arrival y)
    LAYERS: List[int] = field(default_factory=lambda: [4, 4, 4, 4, 4, 1])

    # Plain SGD step size for every backpropagation call
    LEARNING_RATE: float = 0.01

    # Weights and biases start uniformly in [-INIT_RANGE, INIT_RANGE]
    WEIGHT_INIT_RANGE: float = 0.5

    # Ball speeds are divided by this before entering the network
    SPEED_DIVISOR: float = 10.0

    # =========================================================================
    # TRAINING
    # =========================================================================

    # Full passes over the corpus right after startup
    STARTUP_TRAINING_PASSES: int = 1000

    # Per-tick training stops once the corpus holds this many samples
    # (as the corpus grows, a single pass gets slower)
    TRAINING_CAP: int = 1000

    # Extra passes run after every point before the next serve
    CRAM_PASSES: int = 100

    # =========================================================================
    # TRAINING DATA
    # =========================================================================

    TRAINING_DATA_PATH: str = os.path.join('data', 'pong.txt')

    # The corpus is written to disk each time its size reaches a multiple of this
    SAVE_EVERY_UNIQUE: int = 100

    # True: a malformed line in the corpus file raises TrainingDataError
    # False: the line is skipped with a warning
    STRICT_TRAINING_DATA: bool = False

    # =========================================================================
    # HOST SETTINGS
    # =========================================================================

    # Timer intervals (ms) cycled by the speed key
    TICK_INTERVALS: List[int] = field(default_factory=lambda: [5, 20, 100, 1000])
    TICK_INTERVAL: int = 5

    # Quiet (fast-forward) mode hands control back to the host every N ticks
    QUIET_YIELD_EVERY: int = 10

    # Auto mode starts enabled: the right bat tracks the ball by itself
    AUTO_MODE: bool = True

    # Jitter applied to the auto-tracked target when the pointer moves
    POINTER_JITTER: int = 10

    COLOR_BACKGROUND: Tuple[int, int, int] = (0, 0, 0)
    COLOR_BAT: Tuple[int, int, int] = (240, 240, 240)
    COLOR_BALL: Tuple[int, int, int] = (200, 200, 200)
    COLOR_NET: Tuple[int, int, int] = (100, 100, 100)
    COLOR_CURSOR: Tuple[int, int, int] = (255, 0, 0)
    COLOR_TEXT: Tuple[int, int, int] = (255, 255, 255)

    # Draw the goal lines and dead zone
    DRAW_DEBUG_LINES: bool = False

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    MODEL_DIR: str = 'models'
    LOG_DIR: str = 'logs'

    @property
    def MODEL_PATH(self) -> str:
        """Default location of the saved network weights."""
        return os.path.join(self.MODEL_DIR, 'pong_net.pth')

    # Random seed for reproducibility (None for random)
    SEED: Optional[int] = None

    @property
    def DEAD_ZONE_LIMIT(self) -> int:
        """Closest a bat centre (or a learnable ball) may get to an edge."""
        return self.DEAD_ZONE + self.HALF_BAT_LENGTH

    def __post_init__(self):
        """Validation and derived calculations."""
        assert self.SCREEN_WIDTH > 0 and self.SCREEN_HEIGHT > 0, "Court must have a positive size"
        assert self.HALF_BAT_LENGTH > 0, "Bat length must be positive"
        assert 2 * self.DEAD_ZONE_LIMIT < self.SCREEN_HEIGHT, "Dead zones must leave room for the bat"
        assert self.BAT_MAX_STEP > 0, "Bat step must be positive"
        assert self.BALL_MAX_SPEED > 0, "Ball max speed must be positive"
        assert self.LEARNING_RATE > 0, "Learning rate must be positive"
        assert self.SPEED_DIVISOR > 0, "Speed divisor must be positive"
        assert self.SAVE_EVERY_UNIQUE > 0, "Save interval must be positive"
        assert self.QUIET_YIELD_EVERY > 0, "Quiet yield interval must be positive"
        assert self.TICK_INTERVALS, "At least one tick interval is required"


# Global config instance for easy importing
config = Config()


if __name__ == "__main__":
    # Print configuration summary
    cfg = Config()
    print("=" * 60)
    print("Neural Pong - Configuration Summary")
    print("=" * 60)
    print(f"\nCourt: {cfg.SCREEN_WIDTH}x{cfg.SCREEN_HEIGHT}")
    print(f"Bat: half length {cfg.HALF_BAT_LENGTH}, dead zone {cfg.DEAD_ZONE}")
    print(f"\nNeural Network:")
    print(f"   Layers: {cfg.LAYERS}")
    print(f"   Learning rate: {cfg.LEARNING_RATE}")
    print(f"\nTraining:")
    print(f"   Startup passes: {cfg.STARTUP_TRAINING_PASSES}")
    print(f"   Per-tick cap: {cfg.TRAINING_CAP} samples")
    print(f"   Cram passes per point: {cfg.CRAM_PASSES}")
    print(f"\nData: {cfg.TRAINING_DATA_PATH}")
    print("=" * 60)
