"""Character LCD frame buffer (HD44780-style, 16x2 by default)."""

from __future__ import annotations

from dataclasses import dataclass

from mcusim.utils.consts import ConstUtils, as_int


@dataclass(frozen=True)
class LCDSnapshot:
    width: int
    height: int
    buffer: tuple[tuple[str, ...], ...]
    backlight: bool

    def lines(self) -> list[str]:
        return ["".join(row) for row in self.buffer]

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "buffer": [list(row) for row in self.buffer],
            "backlight": self.backlight,
        }


class LCDDisplay:
    """Fixed-size grid of single-character cells.

    Every row always holds exactly ``width`` cells. Writes that land
    outside the grid are clipped cell by cell; nothing here raises.
    """

    def __init__(self, width: int = 16, height: int = 2, backlight: bool = True):
        self.width = width
        self.height = height
        self.backlight = backlight
        self.buffer: list[list[str]] = [
            [ConstUtils.LCD_BLANK] * width for _ in range(height)
        ]

    def clear(self) -> None:
        """Blank every cell in place."""
        for row in self.buffer:
            for col in range(self.width):
                row[col] = ConstUtils.LCD_BLANK

    def print_at(self, row: object, col: object, text: object) -> bool:
        """Write text starting at (row, col).

        Characters falling left of column 0 or right of the last column
        are skipped. An invalid row makes the call a no-op.

        Returns:
            True if the row was valid and the call was applied.
        """
        r = as_int(row)
        c = as_int(col)
        if r is None or c is None or not 0 <= r < self.height:
            return False
        line = self.buffer[r]
        for offset, char in enumerate(str(text)):
            target = c + offset
            if target >= self.width:
                break
            if target >= 0:
                line[target] = char
        return True

    def set_backlight(self, on: object) -> None:
        self.backlight = bool(on)

    def lines(self) -> list[str]:
        return ["".join(row) for row in self.buffer]

    def snapshot(self) -> LCDSnapshot:
        return LCDSnapshot(
            width=self.width,
            height=self.height,
            buffer=tuple(tuple(row) for row in self.buffer),
            backlight=self.backlight,
        )
