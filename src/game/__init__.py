"""
Game Module
===========

The court the network learns on.

Classes:
    Ball       - Ball physics and goal-line detection
    Bat        - Bounded bat movement and hit zones
    ScoreBoard - Two-player scores
    Pong       - The court: ball, bats, scoreboard and serves

The pygame renderer lives in renderer.py and is imported by the host only.
"""

from .ball import Ball, BallDirection, GoalLine
from .bat import Bat, Side
from .scoreboard import ScoreBoard
from .pong import Pong, RallyOutcome, CourtSnapshot

__all__ = [
    'Ball',
    'BallDirection',
    'GoalLine',
    'Bat',
    'Side',
    'ScoreBoard',
    'Pong',
    'RallyOutcome',
    'CourtSnapshot',
]
