"""
Tests for the training data pipeline.

These tests verify:
    - Canonical encoding and decoding
    - Feature and target scaling
    - Deduplication
    - Incremental persistence every 100 unique samples
    - Loading (missing file, duplicates, malformed records)
"""

import logging
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from src.ai.training_data import (
    TrainingSample, TrainingCorpus, TrainingDataError, UNSET_LABEL
)


def make_sample(i: int) -> TrainingSample:
    """A distinct, fully labelled sample."""
    return TrainingSample(
        opponent_bat_y=100.0 + i,
        ball_y=200.0 + i,
        ball_dx=-1.05,
        ball_dy=0.525,
        arrival_y=300.0 + i * 0.5,
    )


@pytest.fixture
def corpus(config):
    return TrainingCorpus(config)


class TestTrainingSample:
    """Test a single sample."""

    def test_new_sample_is_open(self):
        sample = TrainingSample(300, 310, -1.0, 0.5)
        assert sample.is_open
        assert sample.arrival_y == UNSET_LABEL

    def test_labelled_sample_is_closed(self):
        assert not make_sample(0).is_open

    def test_encode_field_order(self):
        sample = TrainingSample(300.0, 312.5, -1.05, 0.525, 287.25)
        assert sample.encode() == "300.0,312.5,-1.05,0.525,287.25"

    def test_encode_int_fields(self):
        """Bat positions are ints; encoding must not depend on that."""
        assert TrainingSample(300, 312.5, -1.05, 0.525, 287.25).encode() == \
            TrainingSample(300.0, 312.5, -1.05, 0.525, 287.25).encode()

    def test_decode_reproduces_fields(self):
        sample = TrainingSample(123.0, 456.789, -2.3456789, 1.0000001, 321.123456789)
        decoded = TrainingSample.decode(sample.encode())
        assert decoded.opponent_bat_y == pytest.approx(sample.opponent_bat_y)
        assert decoded.ball_y == pytest.approx(sample.ball_y)
        assert decoded.ball_dx == pytest.approx(sample.ball_dx)
        assert decoded.ball_dy == pytest.approx(sample.ball_dy)
        assert decoded.arrival_y == pytest.approx(sample.arrival_y)

    def test_decode_strips_line_endings(self):
        decoded = TrainingSample.decode("1,2,3,4,5\r\n")
        assert decoded.arrival_y == 5.0

    @pytest.mark.parametrize("line", [
        "1,2,3,4",
        "1,2,3,4,5,6",
        "1,2,three,4,5",
        "",
    ])
    def test_decode_rejects_malformed(self, line):
        with pytest.raises(TrainingDataError):
            TrainingSample.decode(line)

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            TrainingSample.decode("nope")

    def test_features_scaled(self):
        sample = TrainingSample(300.0, 150.0, -2.0, 1.0, 450.0)
        features = sample.features(600, 10)
        np.testing.assert_allclose(features, [0.5, 0.25, -0.2, 0.1])
        assert features.dtype == np.float32

    def test_target_scaled(self):
        sample = TrainingSample(300.0, 150.0, -2.0, 1.0, 450.0)
        np.testing.assert_allclose(sample.target(600), [0.75])


class TestDeduplication:
    """Test that identical samples are stored once."""

    def test_add_new_sample(self, corpus):
        assert corpus.add(make_sample(0)) is True
        assert len(corpus) == 1

    def test_same_sample_twice(self, corpus):
        corpus.add(make_sample(0))
        assert corpus.add(make_sample(0)) is False
        assert len(corpus) == 1

    def test_identical_fields_different_objects(self, corpus):
        before = len(corpus)
        corpus.add(TrainingSample(1.0, 2.0, 3.0, 4.0, 300.0))
        corpus.add(TrainingSample(1.0, 2.0, 3.0, 4.0, 300.0))
        assert len(corpus) == before + 1

    def test_add_none_ignored(self, corpus):
        assert corpus.add(None) is False
        assert len(corpus) == 0

    def test_contains(self, corpus):
        corpus.add(make_sample(3))
        assert make_sample(3) in corpus
        assert make_sample(4) not in corpus

    def test_order_preserved(self, corpus):
        for i in range(5):
            corpus.add(make_sample(i))
        assert [s.opponent_bat_y for s in corpus] == [100.0, 101.0, 102.0, 103.0, 104.0]


class TestPersistence:
    """Test saving every SAVE_EVERY_UNIQUE unique samples."""

    def test_not_saved_before_boundary(self, corpus):
        for i in range(99):
            corpus.add(make_sample(i))
        assert not os.path.exists(corpus.path)

    def test_saved_at_boundary(self, corpus):
        for i in range(100):
            corpus.add(make_sample(i))
        assert os.path.exists(corpus.path)
        with open(corpus.path, encoding='utf-8') as f:
            lines = f.read().split("\n")
        assert len(lines) == 100
        assert lines[0] == make_sample(0).encode()

    def test_duplicates_do_not_trigger_save(self, corpus):
        for i in range(99):
            corpus.add(make_sample(i))
        corpus.add(make_sample(0))
        assert not os.path.exists(corpus.path)

    def test_save_suppressed(self, corpus):
        for i in range(100):
            corpus.add(make_sample(i), save=False)
        assert not os.path.exists(corpus.path)

    def test_rewrites_whole_corpus_at_next_boundary(self, corpus):
        for i in range(200):
            corpus.add(make_sample(i))
        with open(corpus.path, encoding='utf-8') as f:
            assert len(f.read().split("\n")) == 200

    def test_save_failure_logged_not_raised(self, config, tmp_path, caplog):
        """Writing to a directory fails; play should carry on."""
        corpus = TrainingCorpus(config, path=str(tmp_path))
        corpus.add(make_sample(0), save=False)
        with caplog.at_level(logging.ERROR, logger='neuropong'):
            assert corpus.save() is False
        assert "Failed to save training data" in caplog.text
        assert len(corpus) == 1


class TestLoad:
    """Test loading an earlier run's corpus."""

    def _write(self, path, lines):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write("\n".join(lines))

    def test_missing_file_is_no_op(self, corpus):
        assert corpus.load() == 0
        assert len(corpus) == 0

    def test_load_round_trip(self, config):
        first = TrainingCorpus(config)
        for i in range(10):
            first.add(make_sample(i), save=False)
        first.save()

        second = TrainingCorpus(config)
        assert second.load() == 10
        assert [s.encode() for s in second] == [s.encode() for s in first]

    def test_load_does_not_rewrite_file(self, config):
        lines = [make_sample(i).encode() for i in range(100)]
        self._write(config.TRAINING_DATA_PATH, lines)
        mtime = os.path.getmtime(config.TRAINING_DATA_PATH)

        corpus = TrainingCorpus(config)
        corpus.load()
        assert len(corpus) == 100
        assert os.path.getmtime(config.TRAINING_DATA_PATH) == mtime

    def test_load_deduplicates(self, corpus, config):
        line = make_sample(1).encode()
        self._write(config.TRAINING_DATA_PATH, [line, line, make_sample(2).encode()])
        assert corpus.load() == 2

    def test_malformed_lines_skipped(self, corpus, config, caplog):
        self._write(config.TRAINING_DATA_PATH, [
            make_sample(1).encode(),
            "1,2,3",
            "a,b,c,d,e",
            make_sample(2).encode(),
        ])
        with caplog.at_level(logging.WARNING, logger='neuropong'):
            assert corpus.load() == 2
        assert "Skipping malformed record" in caplog.text

    def test_malformed_line_strict(self, config):
        config.STRICT_TRAINING_DATA = True
        self._write(config.TRAINING_DATA_PATH, [make_sample(1).encode(), "1,2,3"])
        corpus = TrainingCorpus(config)
        with pytest.raises(TrainingDataError, match=":2:"):
            corpus.load()

    def test_blank_lines_ignored(self, corpus, config):
        self._write(config.TRAINING_DATA_PATH, [make_sample(1).encode(), "", ""])
        assert corpus.load() == 1


class TestArrays:
    """Test the stacked training arrays."""

    def test_empty_corpus_shapes(self, corpus):
        inputs, targets = corpus.as_arrays()
        assert inputs.shape == (0, 4)
        assert targets.shape == (0, 1)

    def test_shapes_and_values(self, corpus):
        corpus.add(TrainingSample(300.0, 150.0, -2.0, 1.0, 450.0))
        corpus.add(make_sample(1))
        inputs, targets = corpus.as_arrays()
        assert inputs.shape == (2, 4)
        assert targets.shape == (2, 1)
        np.testing.assert_allclose(inputs[0], [0.5, 0.25, -0.2, 0.1])
        np.testing.assert_allclose(targets[0], [0.75])

    def test_rebuilt_after_add(self, corpus):
        corpus.add(make_sample(1))
        assert len(corpus.as_arrays()[0]) == 1
        corpus.add(make_sample(2))
        assert len(corpus.as_arrays()[0]) == 2

    def test_cached_between_adds(self, corpus):
        corpus.add(make_sample(1))
        assert corpus.as_arrays() is corpus.as_arrays()
