"""
AI Module
=========

Online supervised learning for the left bat.

Classes:
    FeedForwardNetwork - Small tanh network trained by single-example SGD
    TrainingSample     - One feature/label pair harvested from play
    TrainingCorpus     - Deduplicated, incrementally saved sample store
    Trainer            - Per-tick loop binding court, corpus and network
"""

from .network import FeedForwardNetwork
from .training_data import TrainingSample, TrainingCorpus, TrainingDataError
from .trainer import Trainer

__all__ = ['FeedForwardNetwork', 'TrainingSample', 'TrainingCorpus', 'TrainingDataError', 'Trainer']
