"""Two-player scoreboard. Scores wrap back to 0 after 99 (two display digits)."""

from dataclasses import dataclass

MAX_SCORE = 99


@dataclass
class ScoreBoard:
    """Scores for the network (left) and trainer (right) players."""
    left_score: int = 0
    right_score: int = 0

    def left_player_scored(self) -> None:
        self.left_score = 0 if self.left_score >= MAX_SCORE else self.left_score + 1

    def right_player_scored(self) -> None:
        self.right_score = 0 if self.right_score >= MAX_SCORE else self.right_score + 1

    def reset(self) -> None:
        self.left_score = 0
        self.right_score = 0
