"""
Court Renderer
==============

Draws a CourtSnapshot with pygame in the retro black-and-white style:
dashed net, two bats, a square ball and the scores.

The renderer only reads snapshots; it never touches the simulation.
"""

from typing import Optional

import pygame

from config import Config
from .pong import CourtSnapshot


class CourtRenderer:
    """Renders snapshots onto a pygame surface."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.width = self.config.SCREEN_WIDTH
        self.height = self.config.SCREEN_HEIGHT

        pygame.font.init()
        self._font = pygame.font.Font(None, 72)
        self._small_font = pygame.font.Font(None, 24)

    def render(self, screen: pygame.Surface, snapshot: CourtSnapshot, quiet: bool = False) -> None:
        """Draw one frame."""
        cfg = self.config
        screen.fill(cfg.COLOR_BACKGROUND)

        # Draw net (dashed, vertical)
        center_x = self.width // 2
        for y in range(0, self.height, 10):
            pygame.draw.line(screen, cfg.COLOR_NET, (center_x, y), (center_x, y + 5), 1)

        # Pointer position, on the trainer bat's line
        if not snapshot.auto_mode:
            pygame.draw.rect(screen, cfg.COLOR_CURSOR,
                             (snapshot.right_bat_x - 3, snapshot.cursor_y - 3, 6, 6), 1)

        half = snapshot.half_bat_length
        for bat_x, bat_y in ((snapshot.left_bat_x, snapshot.left_bat_y),
                             (snapshot.right_bat_x, snapshot.right_bat_y)):
            pygame.draw.line(screen, cfg.COLOR_BAT, (bat_x, bat_y - half), (bat_x, bat_y + half),
                             cfg.BAT_THICKNESS)

        # Square ball for the authentic look
        pygame.draw.rect(screen, cfg.COLOR_BALL,
                         (int(snapshot.ball_x) - 2, int(snapshot.ball_y) - 2, 4, 4))

        # Scores either side of the net
        left_text = self._font.render(str(snapshot.left_score), True, cfg.COLOR_TEXT)
        screen.blit(left_text, (center_x - 40 - left_text.get_width(), 10))
        right_text = self._font.render(str(snapshot.right_score), True, cfg.COLOR_TEXT)
        screen.blit(right_text, (center_x + 40, 10))

        status = f"Epoch {snapshot.epoch}"
        if quiet:
            status += " - quiet mode (Q to resume display)"
        status_text = self._small_font.render(status, True, cfg.COLOR_NET)
        screen.blit(status_text, (10, self.height - 24))

        if cfg.DRAW_DEBUG_LINES:
            self._draw_debug_lines(screen)

    def _draw_debug_lines(self, screen: pygame.Surface) -> None:
        """Goal lines and dead zone."""
        cfg = self.config
        color = (70, 0, 0)
        left_goal = cfg.BAT_DISTANCE_FROM_EDGE + cfg.GOAL_LINE_MARGIN
        right_goal = self.width - cfg.BAT_DISTANCE_FROM_EDGE - cfg.GOAL_LINE_MARGIN

        pygame.draw.line(screen, color, (left_goal, 0), (left_goal, self.height))
        pygame.draw.line(screen, color, (right_goal, 0), (right_goal, self.height))
        pygame.draw.line(screen, color, (0, cfg.DEAD_ZONE), (self.width, cfg.DEAD_ZONE))
        pygame.draw.line(screen, color, (0, self.height - cfg.DEAD_ZONE),
                         (self.width, self.height - cfg.DEAD_ZONE))
