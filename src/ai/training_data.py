"""
Training Data
=============

Labeled examples harvested from live play, and the corpus that holds them.

How a sample is built:
    1. The trainer (right) bat returns the ball -> a sample is opened with
       the trainer bat Y, ball Y, ball dx and ball dy at that instant
    2. The ball reaches the network (left) bat's goal line -> the ball Y
       there becomes the label
    3. Labels inside either dead zone are thrown away (the bat can never
       reach them, so there is nothing useful to learn)

Corpus file format:
    One sample per line, five comma-separated decimals, in field order.
    No header, no versioning.

        300.0,312.5,-1.05,0.525,287.25
"""

import os
from dataclasses import dataclass, astuple
from typing import Iterator, List, Optional, Set, Tuple

import numpy as np

from config import Config
from src.utils.logger import get_logger, log_corpus_event

logger = get_logger(__name__)

# Label of an open sample (ball has not reached the left goal line yet)
UNSET_LABEL = -1.0

FIELD_COUNT = 5


class TrainingDataError(ValueError):
    """A record in the corpus file could not be decoded."""


@dataclass
class TrainingSample:
    """
    One feature/label pair.

    Attributes:
        opponent_bat_y: Trainer bat Y when it struck the ball
        ball_y: Ball Y when the trainer struck it
        ball_dx: Horizontal speed just after the strike
        ball_dy: Vertical speed just after the strike
        arrival_y: Ball Y at the network bat's goal line (the label)
    """
    opponent_bat_y: float
    ball_y: float
    ball_dx: float
    ball_dy: float
    arrival_y: float = UNSET_LABEL

    @property
    def is_open(self) -> bool:
        return self.arrival_y == UNSET_LABEL

    def encode(self) -> str:
        """Canonical string form, used both on disk and for deduplication."""
        return ",".join(repr(float(value)) for value in astuple(self))

    @classmethod
    def decode(cls, line: str) -> 'TrainingSample':
        """
        Parse one line of the corpus file.

        Raises:
            TrainingDataError: If the line does not hold five numbers
        """
        tokens = line.strip().split(",")
        if len(tokens) != FIELD_COUNT:
            raise TrainingDataError(f"expected {FIELD_COUNT} fields, got {len(tokens)}: {line!r}")
        try:
            values = [float(token) for token in tokens]
        except ValueError as e:
            raise TrainingDataError(f"non-numeric field in {line!r}") from e
        return cls(*values)

    def features(self, height: float, speed_divisor: float) -> np.ndarray:
        """Network input: positions as a fraction of court height, speeds scaled down."""
        return np.array([
            self.opponent_bat_y / height,
            self.ball_y / height,
            self.ball_dx / speed_divisor,
            self.ball_dy / speed_divisor,
        ], dtype=np.float32)

    def target(self, height: float) -> np.ndarray:
        """Network target: arrival Y as a fraction of court height."""
        return np.array([self.arrival_y / height], dtype=np.float32)


class TrainingCorpus:
    """
    Ordered, deduplicated collection of finalised samples.

    The corpus only grows. Every time its size reaches a multiple of
    SAVE_EVERY_UNIQUE the whole corpus is rewritten to disk.

    Example:
        >>> corpus = TrainingCorpus(config)
        >>> corpus.load()
        >>> corpus.add(sample)
        >>> inputs, targets = corpus.as_arrays()
    """

    def __init__(self, config: Optional[Config] = None, path: Optional[str] = None):
        """
        Initialize an empty corpus.

        Args:
            config: Configuration object
            path: Corpus file (defaults to config.TRAINING_DATA_PATH)
        """
        self.config = config or Config()
        self.path = path or self.config.TRAINING_DATA_PATH

        self._samples: List[TrainingSample] = []
        self._unique: Set[str] = set()

        # Stacked inputs/targets, rebuilt lazily after the corpus changes
        self._arrays: Optional[Tuple[np.ndarray, np.ndarray]] = None

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[TrainingSample]:
        return iter(self._samples)

    def __contains__(self, sample: TrainingSample) -> bool:
        return sample.encode() in self._unique

    def add(self, sample: Optional[TrainingSample], save: bool = True) -> bool:
        """
        Add a finalised sample unless an identical one is already held.

        Args:
            sample: Sample to add
            save: Persist the corpus when its size hits a save boundary

        Returns:
            True if the sample was new
        """
        if sample is None:
            return False

        text = sample.encode()
        if text in self._unique:
            return False

        self._unique.add(text)
        self._samples.append(sample)
        self._arrays = None

        if save and len(self._unique) % self.config.SAVE_EVERY_UNIQUE == 0:
            self.save()

        return True

    def save(self) -> bool:
        """
        Write the whole corpus to disk.

        A failed write is logged and otherwise ignored so play can continue.

        Returns:
            True if the file was written
        """
        try:
            dir_path = os.path.dirname(self.path)
            if dir_path:
                os.makedirs(dir_path, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                f.write("\n".join(sample.encode() for sample in self._samples))
        except OSError as e:
            logger.error(f"Failed to save training data to {self.path}: {e}")
            return False

        log_corpus_event('save', self.path, samples=len(self._samples))
        return True

    def load(self) -> int:
        """
        Load samples saved by an earlier run.

        The file is optional: if it does not exist there is nothing to load.
        Malformed lines are skipped with a warning, or raise when
        STRICT_TRAINING_DATA is set.

        Returns:
            Number of new samples added

        Raises:
            TrainingDataError: On a malformed line in strict mode
        """
        if not os.path.exists(self.path):
            logger.debug(f"No training data at {self.path}, starting empty")
            return 0

        with open(self.path, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()

        added = 0
        skipped = 0
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                sample = TrainingSample.decode(line)
            except TrainingDataError as e:
                if self.config.STRICT_TRAINING_DATA:
                    raise TrainingDataError(f"{self.path}:{line_number}: {e}") from e
                logger.warning(f"Skipping malformed record at {self.path}:{line_number}: {e}")
                skipped += 1
                continue

            # it came from this file, no need to write it straight back
            if self.add(sample, save=False):
                added += 1

        log_corpus_event('load', self.path, samples=added, skipped=skipped)
        return added

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Inputs and targets for every sample, in corpus order.

        Returns:
            (inputs of shape (N, 4), targets of shape (N, 1)), float32
        """
        if self._arrays is None:
            height = self.config.SCREEN_HEIGHT
            divisor = self.config.SPEED_DIVISOR
            if self._samples:
                inputs = np.stack([s.features(height, divisor) for s in self._samples])
                targets = np.stack([s.target(height) for s in self._samples])
            else:
                inputs = np.empty((0, 4), dtype=np.float32)
                targets = np.empty((0, 1), dtype=np.float32)
            self._arrays = (inputs, targets)
        return self._arrays
