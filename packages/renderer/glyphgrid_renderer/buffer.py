"""Bounds-safe cell buffer modelling a cols x rows grid in row-major order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .models import NULL_CELL, Cell, CellValue, merge_cell, to_cell


@dataclass(frozen=True)
class Offset:
    col: int
    row: int


@dataclass(frozen=True)
class LineBounds:
    """Where one inserted line sits: its row and first/last columns, plus the cells written there."""

    row: int
    first_x: int
    last_x: int
    first: Cell
    last: Cell


@dataclass(frozen=True)
class MergeTextResult:
    offset: Offset
    wrap_info: list[LineBounds]


class CellBuffer:
    def __init__(self, cols: int = 0, rows: int = 0, default: Cell | None = None) -> None:
        self.cols = 0
        self.rows = 0
        self.default = default or Cell()
        self._cells: list[Cell] = []
        self.resize(cols, rows)

    def resize(self, cols: int, rows: int, default: Cell | None = None) -> None:
        """Resize and reset every cell to the default; nothing is carried over."""
        if cols < 0 or rows < 0:
            raise ValueError("cols and rows must be >= 0")
        if default is not None:
            self.default = default
        self.cols = int(cols)
        self.rows = int(rows)
        self._cells = [self.default] * (self.cols * self.rows)

    def fill(self, value: CellValue) -> None:
        cell = to_cell(value, self.default)
        self._cells = [cell] * len(self._cells)

    def _index(self, x: float, y: float) -> int | None:
        if x < 0 or x >= self.cols:
            return None
        if y < 0 or y >= self.rows:
            return None
        return int(x) + int(y) * self.cols

    def get(self, x: float, y: float) -> Cell:
        i = self._index(x, y)
        if i is None:
            return NULL_CELL
        return self._cells[i]

    def set(self, value: CellValue, x: float, y: float) -> None:
        i = self._index(x, y)
        if i is not None:
            self._cells[i] = to_cell(value, self.default)

    def merge(self, value: CellValue, x: float, y: float) -> None:
        i = self._index(x, y)
        if i is not None:
            self._cells[i] = merge_cell(self._cells[i], value)

    def set_rect(self, value: CellValue, x: int, y: int, w: int, h: int) -> None:
        for j in range(y, y + h):
            for i in range(x, x + w):
                self.set(value, i, j)

    def merge_rect(self, value: CellValue, x: int, y: int, w: int, h: int) -> None:
        for j in range(y, y + h):
            for i in range(x, x + w):
                self.merge(value, i, j)

    def merge_text(self, text: str | Mapping[str, Any], x: int, y: int) -> MergeTextResult:
        """Merge text line by line starting at (x, y); long lines are clipped, not wrapped.

        A mapping must carry the text under ``"text"``; its other keys are
        merged into every inserted cell. The result holds the coordinate of
        the last inserted character and, per line, a ``LineBounds`` whose
        coordinates can be passed back to ``merge`` to bracket the text
        with raw markup, e.g. ``merge({"begin_markup": "<a>"}, b.first_x, b.row)``.
        """
        if isinstance(text, Mapping):
            patch = {k: v for k, v in text.items() if k != "text"}
            body = str(text.get("text", ""))
        else:
            patch = {}
            body = text

        col = x
        row = y
        wrap_info: list[LineBounds] = []
        for line in body.split("\n"):
            for n, char in enumerate(line):
                col = x + n
                self.merge({**patch, "char": char}, col, row)
            # Clipped lines end on the last visible column.
            last_x = max(x, min(x + len(line), self.cols) - 1)
            wrap_info.append(
                LineBounds(
                    row=row,
                    first_x=x,
                    last_x=last_x,
                    first=self.get(x, row),
                    last=self.get(last_x, row),
                )
            )
            row += 1

        return MergeTextResult(offset=Offset(col=col, row=max(y, row - 1)), wrap_info=wrap_info)

    def rows_as_text(self) -> list[str]:
        return [
            "".join(str(cell.char) for cell in self._cells[r * self.cols : (r + 1) * self.cols])
            for r in range(self.rows)
        ]

    def cells(self) -> list[Cell]:
        return list(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __getitem__(self, index: int) -> Cell:
        return self._cells[index]

    def __setitem__(self, index: int, value: CellValue) -> None:
        self._cells[index] = to_cell(value, self.default)
