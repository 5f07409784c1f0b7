#!/usr/bin/env python3
"""
Neural Pong - Main Entry Point
==============================

Runs the court with the left bat steered by a neural network that retrains
itself every tick from the rallies it watches.

Usage:
    # Watch it learn (default: the right bat tracks the ball automatically)
    python main.py

    # Play against it yourself with the mouse
    python main.py --manual

    # Train without a window for a fixed number of ticks
    python main.py --headless --ticks 200000

    # Resume from saved weights and a custom corpus file
    python main.py --model models/pong_net.pth --data data/pong.txt

Press:
    - P: Pause/Resume
    - S: Cycle speed (5, 20, 100, 1000 ms per tick)
    - A: Toggle auto mode (ball tracker vs mouse)
    - Q: Toggle quiet mode (fast-forward, no display)
    - ESC: Quit (saves training data and weights)
"""

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import argparse
import os
import sys
import time

import numpy as np
import pygame
import torch

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config
from src.ai.trainer import Trainer, next_tick_interval
from src.game.renderer import CourtRenderer
from src.utils.logger import get_logger, setup_logging, LogLevel

logger = None


class PongApp:
    """Window, input and timer around a Trainer."""

    def __init__(self, config: Config, trainer: Trainer):
        self.config = config
        self.trainer = trainer

        pygame.init()
        self.screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
        pygame.display.set_caption("Neural Pong")
        self.renderer = CourtRenderer(config)

        self.running = True
        self.paused = False
        self.quiet = False
        self.tick_interval = config.TICK_INTERVAL

        pygame.mouse.set_visible(not trainer.auto_mode)

    def handle_events(self) -> bool:
        """Process pending input. Returns False once the window should close."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEMOTION:
                self.trainer.pointer_moved(event.pos[1])
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_p:
                    self.paused = not self.paused
                elif event.key == pygame.K_s:
                    self.tick_interval = next_tick_interval(self.tick_interval, self.config.TICK_INTERVALS)
                    logger.info(f"Tick interval: {self.tick_interval} ms")
                elif event.key == pygame.K_a:
                    auto = self.trainer.toggle_auto_mode()
                    pygame.mouse.set_visible(not auto)
                elif event.key == pygame.K_q:
                    self.quiet = not self.quiet
                    logger.info(f"Quiet mode {'on' if self.quiet else 'off'}")
        return self.running

    def _quiet_yield(self) -> bool:
        """Called every few ticks in quiet mode to keep the window responsive."""
        if not self.handle_events():
            return False
        return self.quiet and not self.paused

    def run(self) -> None:
        while self.running:
            self.handle_events()

            if self.quiet and not self.paused:
                self.renderer.render(self.screen, self.trainer.snapshot(), quiet=True)
                pygame.display.flip()
                self.trainer.run_quiet(on_yield=self._quiet_yield)
                continue

            if not self.paused:
                self.trainer.tick()

            self.renderer.render(self.screen, self.trainer.snapshot())
            pygame.display.flip()
            pygame.display.set_caption(f"Neural Pong - Epoch {self.trainer.epoch}")

            pygame.time.wait(self.tick_interval)

    def close(self) -> None:
        pygame.quit()


def run_headless(trainer: Trainer, ticks: int, report_every: int) -> None:
    """Run a fixed number of ticks without a window."""
    if report_every < 1:
        raise ValueError(f"report_every must be positive, got {report_every}")

    start_time = time.time()
    done = 0
    while done < ticks:
        batch = min(report_every, ticks - done)
        done += trainer.run_quiet(max_ticks=batch)

        scoreboard = trainer.court.scoreboard
        elapsed = time.time() - start_time
        logger.info(
            f"ticks={done:,} | epoch={trainer.epoch} | "
            f"score={scoreboard.left_score}-{scoreboard.right_score} | "
            f"samples={len(trainer.corpus)} | loss={trainer.last_loss:.6f} | "
            f"{done / max(elapsed, 1e-9):,.0f} ticks/sec"
        )


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Neural Pong - a bat steered by a network that learns while it plays",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--headless', action='store_true',
        help='No window: run --ticks ticks as fast as possible'
    )
    parser.add_argument(
        '--ticks', type=positive_int, default=100_000,
        help='Ticks to run in headless mode (default: 100000)'
    )
    parser.add_argument(
        '--report-every', type=positive_int, default=10_000,
        help='Headless progress report interval in ticks (default: 10000)'
    )
    parser.add_argument(
        '--manual', action='store_true',
        help='Start with the right bat following the mouse instead of the ball'
    )
    parser.add_argument(
        '--data', type=str, default=None,
        help='Training data file (default: data/pong.txt)'
    )
    parser.add_argument(
        '--strict-data', action='store_true',
        help='Stop on a malformed training data line instead of skipping it'
    )
    parser.add_argument(
        '--model', type=str, default=None,
        help='Network weights to resume from (also where weights are saved on exit)'
    )
    parser.add_argument(
        '--lr', type=float, default=None,
        help='Learning rate'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed'
    )
    parser.add_argument(
        '--log-level', type=str, default='INFO',
        choices=[level.name for level in LogLevel],
        help='Console log level (default: INFO)'
    )

    return parser.parse_args(argv)


def main():
    """Main entry point."""
    global logger

    args = parse_args()
    config = Config()

    setup_logging(log_dir=config.LOG_DIR, level=LogLevel[args.log_level])
    logger = get_logger('main')

    if args.data:
        config.TRAINING_DATA_PATH = args.data
    if args.strict_data:
        config.STRICT_TRAINING_DATA = True
    if args.lr:
        config.LEARNING_RATE = args.lr
    if args.manual:
        config.AUTO_MODE = False

    # Set seed if specified
    if args.seed is not None:
        np.random.seed(args.seed)
        torch.manual_seed(args.seed)
        config.SEED = args.seed

    config.__post_init__()

    model_path = args.model or config.MODEL_PATH

    trainer = Trainer(config)
    trainer.start(model_path=model_path)

    app = None
    try:
        if args.headless:
            run_headless(trainer, args.ticks, args.report_every)
        else:
            app = PongApp(config, trainer)
            app.run()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
    finally:
        trainer.save(model_path)
        if app:
            app.close()


if __name__ == "__main__":
    main()
