"""
Neural Pong - Source Package
============================

A Pong court where the left bat is steered by a neural network that keeps
retraining itself on the rallies it watches.

Modules:
    game/   - Ball physics, bats, scoreboard, court and renderer
    ai/     - Training data, feedforward network and the online trainer
    utils/  - Logging
"""

__version__ = "1.0.0"
