"""
Training Loop
=============

Binds the court, the training corpus and the network into a closed loop:
    1. Move the ball and deal with any goal-line arrival
    2. Open a sample when the trainer returns the ball, label it when the
       ball reaches the network's bat
    3. Steer the network's bat with the network's current prediction
    4. Train on the whole corpus every tick (until the corpus is large)
    5. After every point, cram extra passes before the next serve

Everything runs synchronously inside a tick. A host calls tick() from a
timer, or run_quiet() to fast-forward without rendering.
"""

import time
from typing import Callable, Optional

import torch

from config import Config
from src.game.ball import GoalLine
from src.game.pong import Pong, RallyOutcome, CourtSnapshot
from src.utils.logger import get_logger, log_point_scored
from .network import FeedForwardNetwork
from .training_data import TrainingCorpus, TrainingSample

logger = get_logger(__name__)


class Trainer:
    """
    Online trainer for the network-controlled bat.

    Responsibilities:
        1. Route goal-line arrivals into sample capture and scoring
        2. Move both bats each tick
        3. Run bounded training passes and post-point cramming
        4. Expose the court snapshot and accept trainer input

    Example:
        >>> trainer = Trainer(Config())
        >>> trainer.start()
        >>> for _ in range(1000):
        ...     trainer.tick()
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        court: Optional[Pong] = None,
        network: Optional[FeedForwardNetwork] = None,
        corpus: Optional[TrainingCorpus] = None
    ):
        """
        Initialize the trainer.

        Args:
            config: Configuration object
            court: Court instance (created from config if None)
            network: Network steering the left bat (created from config if None)
            corpus: Training corpus (created from config if None)
        """
        self.config = config or Config()
        self.court = court or Pong(self.config)
        self.network = network or FeedForwardNetwork(config=self.config)
        self.corpus = corpus if corpus is not None else TrainingCorpus(self.config)

        self.height = self.config.SCREEN_HEIGHT

        # The sample waiting for its label (opened when the trainer returns the ball)
        self.current_sample: Optional[TrainingSample] = None

        # Trainer input
        self.auto_mode = self.config.AUTO_MODE
        self.y_target = self.court.right_bat.y
        self.cursor_y = self.court.right_bat.y

        self.total_ticks = 0
        self.last_loss = 0.0

    @property
    def epoch(self) -> int:
        """Serves so far."""
        return self.court.epoch

    def start(self, model_path: Optional[str] = None) -> None:
        """
        Load earlier training data (and weights), then pre-train on it.

        Args:
            model_path: Saved network weights to resume from, if any
        """
        self.corpus.load()
        if model_path:
            self.network.load(model_path)

        passes = self.config.STARTUP_TRAINING_PASSES
        if len(self.corpus) and passes:
            start_time = time.time()
            self.train(passes)
            logger.info(
                f"Pre-trained {passes} passes over {len(self.corpus)} samples "
                f"in {time.time() - start_time:.1f}s (loss={self.last_loss:.6f})"
            )

    # =========================================================================
    # TRAINING
    # =========================================================================

    def train_pass(self) -> float:
        """
        One backpropagation step per corpus sample, in corpus order.

        Returns:
            Mean loss over the pass (0.0 for an empty corpus)
        """
        inputs, targets = self.corpus.as_arrays()
        if len(inputs) == 0:
            return 0.0

        x = torch.from_numpy(inputs)
        y = torch.from_numpy(targets)

        total = 0.0
        for i in range(len(x)):
            total += self.network.back_propagate(x[i], y[i])

        self.last_loss = total / len(x)
        return self.last_loss

    def train(self, passes: int) -> float:
        """Run several full passes; return the mean loss of the last one."""
        loss = 0.0
        for _ in range(passes):
            loss = self.train_pass()
        return loss

    # =========================================================================
    # SIMULATION
    # =========================================================================

    def tick(self, y_target: Optional[int] = None) -> CourtSnapshot:
        """
        Advance the simulation one step.

        Args:
            y_target: New target for the trainer bat (manual mode)

        Returns:
            The court after the step
        """
        if y_target is not None:
            self.set_target(y_target)

        line = self.court.move_ball()
        if line is GoalLine.LEFT:
            self._ball_reached_left()
        elif line is GoalLine.RIGHT:
            self._ball_reached_right()

        self._move_bats()

        # as the corpus grows each pass gets slower, so stop at the cap
        if len(self.corpus) < self.config.TRAINING_CAP:
            self.train_pass()

        self.total_ticks += 1
        return self.snapshot()

    def _move_bats(self) -> None:
        if self.auto_mode:
            self.cursor_y = self.court.auto_target()
            self.y_target = self.cursor_y

        self.court.move_trainer_bat(self.y_target)

        if self.current_sample is not None:
            self.court.move_ai_bat(self.predict_arrival_y())

    def predict_arrival_y(self) -> int:
        """Where the network expects the open sample's ball to arrive."""
        assert self.current_sample is not None
        features = self.current_sample.features(self.height, self.config.SPEED_DIVISOR)
        output = self.network.feed_forward(features)
        return int(round(float(output[0]) * self.height))

    def _ball_reached_left(self) -> None:
        """Label the open sample, then see whether the network's bat hit the ball."""
        sample = self.current_sample
        if sample is not None and sample.is_open:
            ball_y = self.court.ball.y
            sample.arrival_y = ball_y

            # ones ending in the dead zone can never be reached, no point learning them
            if self.court.is_learnable(ball_y):
                self.corpus.add(sample)

        outcome = self.court.resolve_left()
        if outcome is RallyOutcome.SCORED:
            self._point_scored('right')

    def _ball_reached_right(self) -> None:
        """See whether the trainer's bat hit the ball; a return opens a sample."""
        outcome = self.court.resolve_right()
        if outcome is RallyOutcome.SCORED:
            self._point_scored('left')
        elif outcome is RallyOutcome.RETURNED:
            ball = self.court.ball
            self.current_sample = TrainingSample(
                opponent_bat_y=self.court.right_bat.y,
                ball_y=ball.y,
                ball_dx=ball.dx,
                ball_dy=ball.dy,
            )

    def _point_scored(self, scorer: str) -> None:
        """Cram training on everything so far, then serve."""
        loss = self.train(self.config.CRAM_PASSES)

        scoreboard = self.court.scoreboard
        log_point_scored(
            scorer,
            scoreboard.left_score,
            scoreboard.right_score,
            self.court.epoch,
            len(self.corpus),
            loss if len(self.corpus) else None,
        )

        self.court.new_ball()

    def run_quiet(
        self,
        max_ticks: Optional[int] = None,
        on_yield: Optional[Callable[[], bool]] = None
    ) -> int:
        """
        Fast-forward: run ticks back-to-back without rendering.

        Every QUIET_YIELD_EVERY ticks control goes to on_yield so the host
        stays responsive; returning False from it stops the run.

        Args:
            max_ticks: Stop after this many ticks (None = until on_yield says stop)
            on_yield: Host callback

        Returns:
            Ticks run
        """
        if max_ticks is None and on_yield is None:
            raise ValueError("run_quiet needs max_ticks or an on_yield callback to stop")

        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            self.tick()
            ticks += 1

            if ticks % self.config.QUIET_YIELD_EVERY == 0 and on_yield is not None:
                if not on_yield():
                    break

        return ticks

    # =========================================================================
    # TRAINER INPUT
    # =========================================================================

    def set_target(self, y: int) -> None:
        """Pointer-driven target for the trainer bat (ignored in auto mode)."""
        self.cursor_y = y
        if not self.auto_mode:
            self.y_target = y

    def pointer_moved(self, y: int) -> None:
        """
        Pointer moved over the court.

        In manual mode the pointer is the target. In auto mode a pointer move
        just nudges the tracked target by a small random jitter.
        """
        if not self.auto_mode:
            self.set_target(y)
            return

        jitter = self.config.POINTER_JITTER
        self.cursor_y = int(self.court.ball.y + self.court.rng.integers(-jitter, jitter))
        self.y_target = self.cursor_y

    def toggle_auto_mode(self) -> bool:
        """Switch between auto-tracking and pointer control; return the new mode."""
        self.auto_mode = not self.auto_mode
        return self.auto_mode

    def snapshot(self) -> CourtSnapshot:
        return self.court.snapshot(auto_mode=self.auto_mode, cursor_y=self.cursor_y)

    def save(self, model_path: Optional[str] = None) -> None:
        """Persist the corpus and the network weights."""
        self.corpus.save()
        self.network.save(model_path or self.config.MODEL_PATH)


def next_tick_interval(current: int, intervals=None) -> int:
    """
    Step through the timer speeds (5 -> 20 -> 100 -> 1000 -> 5 ms).

    An interval not in the list restarts the cycle.
    """
    intervals = intervals or Config().TICK_INTERVALS
    if current in intervals:
        return intervals[(intervals.index(current) + 1) % len(intervals)]
    return intervals[0]
