"""
Screens
========
Draw functions for the playfield, the status bar, and the overlay
screens shown between levels.
"""

from .engine import (
    GameRenderer, GRAY_DARK, GRAY_DARKER, GRAY_MED,
    NEON_CYAN, NEON_GREEN, NEON_MAGENTA, NEON_RED, NEON_YELLOW, WHITE
)
from .levels import LevelController, LevelPhase


PLAYER_CHAR = '@'
GOAL_CHAR = '#'

TITLE = 'Pulka'


def _centered(renderer: GameRenderer, y: int, text: str, color: int):
    x = max(0, renderer.width // 2 - len(text) // 2)
    renderer.buffer.put_string(x, y, text, color)


def render_playfield(controller: LevelController, renderer: GameRenderer):
    """Goal zone, player, projectiles, and the level label."""
    ctx = controller.context

    renderer.fill_box(ctx.goal_box(), GOAL_CHAR, NEON_GREEN)
    renderer.fill_box(ctx.player.box(), PLAYER_CHAR, NEON_CYAN)
    for proj in ctx.projectiles:
        renderer.put_braille_box(proj.box(), NEON_RED)

    level = min(controller.level_index, controller.level_count)
    renderer.buffer.put_string(1, 0, f'Level {level}', WHITE)


def render_ui(controller: LevelController, renderer: GameRenderer):
    """Render the status bar in the bottom rows."""
    ui_y = renderer.game_height
    width = renderer.width

    renderer.buffer.put_string(0, ui_y, '=' * width, GRAY_DARK)
    renderer.buffer.put_string(2, ui_y, f' {TITLE.upper()} ', NEON_MAGENTA)

    level = min(controller.level_index, controller.level_count)
    status = f' LEVEL:{level}/{controller.level_count}  INTERVAL:{controller.spawn_interval_ms}ms '
    renderer.buffer.put_string(max(0, width - len(status) - 1), ui_y, status, NEON_YELLOW)

    ctx = controller.context
    info = f'PROJECTILES:{len(ctx.projectiles)}  SPAWNED:{ctx.spawn_count}'
    renderer.buffer.put_string(2, ui_y + 1, info, GRAY_MED)

    controls = 'ARROWS/WASD:Move  S:Start level  R:Restart  F:FPS  Q:Quit'
    renderer.buffer.put_string(2, ui_y + 2, controls, GRAY_DARKER)

    if renderer.show_fps:
        fps_text = f'FPS:{renderer.current_fps:.0f}'
        renderer.buffer.put_string(width - len(fps_text) - 2, 0, fps_text, GRAY_MED)


def render_await_screen(controller: LevelController, renderer: GameRenderer, frame: int):
    """Level title card shown before every level."""
    mid = renderer.game_height // 2
    _centered(renderer, mid - 2, TITLE, NEON_MAGENTA)
    _centered(renderer, mid, f'Level {controller.level_index}', NEON_CYAN)
    if (frame // 30) % 2 == 0:
        _centered(renderer, mid + 2, 'Press (s) to start the level', NEON_GREEN)
    renderer.draw_border('.', GRAY_DARKER)


def _render_end_screen(renderer: GameRenderer, headline: str, color: int, frame: int):
    mid = renderer.game_height // 2
    _centered(renderer, mid, headline, color)
    if (frame // 30) % 2 == 0:
        _centered(renderer, mid + 2, 'Press (r) to restart the game', NEON_CYAN)


def render_lost_screen(renderer: GameRenderer, frame: int):
    _render_end_screen(renderer, 'You Lose!', NEON_RED, frame)


def render_complete_screen(renderer: GameRenderer, frame: int):
    _render_end_screen(renderer, 'You Win!', NEON_YELLOW, frame)


def render_frame(controller: LevelController, renderer: GameRenderer, frame: int):
    """Compose the full frame for the controller's current phase."""
    phase = controller.phase

    if phase == LevelPhase.AWAITING_START:
        render_await_screen(controller, renderer, frame)
    else:
        # Lost and complete screens overlay the final frame of play
        render_playfield(controller, renderer)
        if phase == LevelPhase.LOST:
            render_lost_screen(renderer, frame)
        elif phase == LevelPhase.COMPLETE:
            render_complete_screen(renderer, frame)

    render_ui(controller, renderer)
