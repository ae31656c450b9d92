#!/usr/bin/env python3
"""
PULKA - Terminal Dodge
=======================
Reach the goal on the right edge while dodging projectiles, across
five levels of rising spawn rate.

Controls:
    ARROWS  - Move (WASD also works)
    S/ENTER - Start level
    R       - Restart game
    F       - Toggle FPS display
    Q/ESC   - Quit
"""

import argparse
import logging
import random
import sys
import time
from typing import List, Optional

from blessed import Terminal

from .components import Playfield
from .config import ConfigError, GameConfig, load_config
from .engine import GameRenderer
from .input import TerminalKeyboardProvider
from .levels import LevelController, LevelPhase, LevelState
from .screens import render_frame

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MIN_WIDTH = 40
MIN_HEIGHT = 16


# =============================================================================
# GAME
# =============================================================================

class Game:
    """Terminal front end: input, one simulation step per frame, render."""

    def __init__(self, term: Terminal, config: GameConfig,
                 rng: Optional[random.Random] = None):
        self.term = term
        self.renderer = GameRenderer(term)
        self.input_provider = TerminalKeyboardProvider()
        self.playfield = Playfield(*self.renderer.playfield_size())
        self.controller = LevelController(config, self.playfield, rng)
        self.controller.add_listener(self._on_transition)

        self.running = True
        self.frame = 0
        self._clock_start = time.perf_counter()

    def now_ms(self) -> float:
        return (time.perf_counter() - self._clock_start) * 1000.0

    def _on_transition(self, old: LevelPhase, new: LevelPhase, state: LevelState):
        if new == LevelPhase.LOST:
            self.renderer.trigger_shake(intensity=2, frames=12)
        elif new == LevelPhase.AWAITING_START:
            self.input_provider.reset()

    def check_resize(self):
        """Follow terminal size changes; the player is re-clamped on the next step."""
        width, height = self.term.width, self.term.height
        if (width, height) == (self.renderer.width, self.renderer.height):
            return
        self.renderer.resize(width, height)
        self.playfield.resize(*self.renderer.playfield_size())
        logger.debug('Playfield resized to %sx%s px',
                     self.playfield.width, self.playfield.height)
        print(self.term.home + self.term.clear, end='', flush=True)

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            key_str = key.lower() if not key.is_sequence else ''
            # 's' doubles as "down" once a level is running
            if self.controller.phase == LevelPhase.AWAITING_START and (
                    key_str == 's' or key.name == 'KEY_ENTER'):
                self.controller.start_level(self.now_ms())
            elif not self.input_provider.process_key(key):
                if key_str == 'q' or key.name == 'KEY_ESCAPE':
                    self.running = False
                    return
                elif key_str == 'r':
                    self.controller.restart_game()
                elif key_str == 'f':
                    self.renderer.show_fps = not self.renderer.show_fps
            key = self.term.inkey(timeout=0)

    def update(self):
        """Run exactly one simulation step."""
        self.frame += 1
        self.input_provider.update()
        intent = self.input_provider.read(self.controller.context.player.box())
        self.controller.tick(intent, self.now_ms())

    def render(self):
        self.renderer.begin_frame()
        render_frame(self.controller, self.renderer, self.frame)
        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)


# =============================================================================
# MAIN LOOP
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pulka',
        description='Dodge the projectiles and reach the goal.',
    )
    parser.add_argument('--config', help='YAML file overriding the default tuning values')
    parser.add_argument('--mobile', action='store_true', default=None,
                        help='use the mobile level schedule')
    parser.add_argument('--seed', type=int, help='seed for projectile placement')
    parser.add_argument('--log-file', help='write game events to this file')
    parser.add_argument('--fps', action='store_true', help='show the FPS counter')
    return parser


def configure_logging(log_file: Optional[str]) -> Optional[logging.Handler]:
    """Send the game's log records to log_file; without one they are dropped."""
    # The terminal belongs to the renderer, so logs only ever go to a file
    if not log_file:
        return None
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s %(name)s: %(message)s'))
    package_logger = logging.getLogger('pulka')
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.INFO)
    return handler


def run(game: Game):
    """Frame loop: one step and one render per frame, paced by wall clock."""
    fps_timer = 0.0
    fps_frame_count = 0
    last_time = time.perf_counter()

    while game.running:
        now = time.perf_counter()
        fps_timer += now - last_time
        last_time = now

        game.check_resize()
        game.handle_input()
        if not game.running:
            break
        game.update()
        game.render()
        fps_frame_count += 1

        if fps_timer >= 0.5:
            game.renderer.current_fps = fps_frame_count / fps_timer
            fps_frame_count = 0
            fps_timer = 0.0

        elapsed = time.perf_counter() - now
        sleep_time = FRAME_TIME - elapsed
        if sleep_time > 0.001:
            time.sleep(sleep_time)


def main(argv: Optional[List[str]] = None):
    """Entry point. Sets up the terminal and runs the game loop."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    try:
        config = load_config(args.config, mobile=args.mobile)
    except ConfigError as e:
        print(f'Configuration error: {e}', file=sys.stderr)
        sys.exit(2)

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    rng = random.Random(args.seed) if args.seed is not None else None
    logger.info('Starting game (mobile=%s, seed=%s)', config.mobile, args.seed)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        game = Game(term, config, rng)
        game.renderer.show_fps = args.fps

        print(term.home + term.clear, end='', flush=True)
        run(game)
        print(term.normal, end='', flush=True)


if __name__ == '__main__':
    main()
