"""
Rendering Engine
=================
Double-buffered terminal renderer that projects the pixel-space
playfield onto terminal cells.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import random

from blessed import Terminal

from .components import Box


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196

GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255

# World pixels covered by one terminal cell (cells are about twice as tall as wide)
CELL_WIDTH_PX = 10
CELL_HEIGHT_PX = 20

# Rows reserved for the status bar under the playfield
UI_ROWS = 3


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7

    def matches(self, other: 'Cell') -> bool:
        return self.char == other.char and self.fg_color == other.fg_color

    def reset(self):
        self.char = ' '
        self.fg_color = 7


class DoubleBuffer:
    """
    Writes go to a back buffer; present() emits escape sequences only for
    cells that differ from the front buffer, then swaps the two.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        """Put a character in the back buffer; out-of-range writes are dropped."""
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def present(self) -> str:
        """Swap buffers and return the output for changed cells only."""
        term = self.term
        output_parts = []

        for y, (back_row, front_row) in enumerate(zip(self.back, self.front)):
            for x, (cell, shown) in enumerate(zip(back_row, front_row)):
                if cell.matches(shown):
                    continue
                output_parts.append(term.move_xy(x, y) + self._normal
                                    + term.color(cell.fg_color) + (cell.char or ' '))

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


class BrailleCanvas:
    """
    Sub-cell rendering using Unicode Braille patterns.

    Each character cell maps to a 2x4 dot grid. Projectiles are only a few
    pixels tall, so they are drawn as dots instead of whole cells.
    """

    # Braille bit for each (column, row) dot inside a cell
    DOT_BITS = {
        (0, 0): 0x01, (0, 1): 0x02, (0, 2): 0x04, (0, 3): 0x40,
        (1, 0): 0x08, (1, 1): 0x10, (1, 2): 0x20, (1, 3): 0x80,
    }
    BASE = 0x2800

    def __init__(self, char_width: int, char_height: int):
        self.char_width = char_width
        self.char_height = char_height
        self.canvas: List[List[int]] = []
        self.colors: List[List[int]] = []
        self.clear()

    def clear(self):
        self.canvas = [[0] * self.char_width for _ in range(self.char_height)]
        self.colors = [[WHITE] * self.char_width for _ in range(self.char_height)]

    def set_pixel(self, px: int, py: int, color: int = WHITE):
        """Set a dot at dot coordinates (2 per cell across, 4 down)."""
        char_x, dot_x = divmod(px, 2)
        char_y, dot_y = divmod(py, 4)
        if 0 <= char_x < self.char_width and 0 <= char_y < self.char_height:
            self.canvas[char_y][char_x] |= self.DOT_BITS[dot_x, dot_y]
            self.colors[char_y][char_x] = color

    def get_char(self, cx: int, cy: int) -> Tuple[str, int]:
        if 0 <= cx < self.char_width and 0 <= cy < self.char_height:
            pattern = self.canvas[cy][cx]
            if pattern > 0:
                return chr(self.BASE + pattern), self.colors[cy][cx]
        return '', WHITE

    def blit_to_buffer(self, buffer: DoubleBuffer):
        """Overlay the dots on cells the buffer left blank."""
        rows = min(self.char_height, buffer.height)
        cols = min(self.char_width, buffer.width)
        for cy in range(rows):
            for cx in range(cols):
                char, color = self.get_char(cx, cy)
                if char and buffer.back[cy][cx].char == ' ':
                    buffer.put(cx, cy, char, color)


@dataclass
class GameRenderer:
    """
    Projects world pixels onto the terminal grid and applies screen shake
    to everything drawn inside the playfield.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)
    braille: BrailleCanvas = field(init=False)

    # Screen shake: cell offset for this frame, frames left, max offset
    shake: Tuple[int, int] = (0, 0)
    shake_frames: int = 0
    shake_intensity: int = 1

    # FPS display
    show_fps: bool = False
    current_fps: float = 60.0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)
        self.braille = BrailleCanvas(self.buffer.width, self.game_height)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Height of the playfield in rows (excluding UI rows)."""
        return max(0, self.buffer.height - UI_ROWS)

    def playfield_size(self) -> Tuple[int, int]:
        """Playfield size in world pixels for the current terminal size."""
        return self.width * CELL_WIDTH_PX, self.game_height * CELL_HEIGHT_PX

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)
        self.braille = BrailleCanvas(width, self.game_height)

    def trigger_shake(self, intensity: int = 1, frames: int = 3):
        self.shake_intensity = intensity
        self.shake_frames = max(self.shake_frames, frames)

    def _roll_shake(self):
        if self.shake_frames <= 0:
            self.shake = (0, 0)
            return
        spread = self.shake_intensity
        self.shake = (random.randint(-spread, spread),
                      random.randint(-(spread // 2), spread // 2))
        self.shake_frames -= 1

    def begin_frame(self):
        self.buffer.clear_back()
        self.braille.clear()

    def end_frame(self) -> str:
        """Overlay the dots, roll next frame's shake, and return the diff output."""
        self.braille.blit_to_buffer(self.buffer)
        self._roll_shake()
        return self.buffer.present()

    # -------------------------------------------------------------------------
    # World-space drawing (shaken)
    # -------------------------------------------------------------------------

    @staticmethod
    def world_to_cell(x: float, y: float) -> Tuple[int, int]:
        return int(x // CELL_WIDTH_PX), int(y // CELL_HEIGHT_PX)

    def fill_box(self, box: Box, char: str, color: int):
        """Fill every cell the box touches, at least one cell."""
        left, top = self.world_to_cell(box.x, box.y)
        right, bottom = self.world_to_cell(box.right - 1e-6, box.bottom - 1e-6)
        sx, sy = self.shake
        for cy in range(top, min(max(top, bottom) + 1, self.game_height)):
            row = cy + sy
            if not 0 <= row < self.game_height:
                continue
            for cx in range(left, max(left, right) + 1):
                self.buffer.put(cx + sx, row, char, color)

    def put_braille_box(self, box: Box, color: int = WHITE):
        """Draw a small box as braille dots (2x4 dots per cell)."""
        dot_w = CELL_WIDTH_PX / 2
        dot_h = CELL_HEIGHT_PX / 4
        sx, sy = self.shake
        x0 = int(box.x // dot_w) + sx * 2
        y0 = int(box.y // dot_h) + sy * 4
        x1 = int((box.right - 1e-6) // dot_w) + sx * 2
        y1 = int((box.bottom - 1e-6) // dot_h) + sy * 4
        for py in range(y0, max(y0, y1) + 1):
            for px in range(x0, max(x0, x1) + 1):
                self.braille.set_pixel(px, py, color)

    # -------------------------------------------------------------------------
    # Screen-space drawing
    # -------------------------------------------------------------------------

    def draw_border(self, char: str, color: int):
        """Outline the playfield area."""
        bottom = self.game_height - 1
        if bottom < 0:
            return
        self.buffer.put_string(0, 0, char * self.width, color)
        self.buffer.put_string(0, bottom, char * self.width, color)
        for y in range(1, bottom):
            self.buffer.put(0, y, char, color)
            self.buffer.put(self.width - 1, y, char, color)
