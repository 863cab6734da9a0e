from __future__ import annotations

from typing import Iterable, List, Tuple

from .errors import InvalidTileIndex


def index(row: int, col: int, columns: int) -> int:
    return row * columns + col


def coords(idx: int, columns: int) -> Tuple[int, int]:
    return divmod(idx, columns)


def check_index(idx: int, columns: int, rows: int) -> None:
    if not (0 <= idx < columns * rows):
        raise InvalidTileIndex()


def neighbors(idx: int, columns: int, rows: int) -> Tuple[int, ...]:
    """Indices of the tiles touching ``idx`` on a ``columns`` x ``rows`` grid.

    Corners have 3 neighbors, edges 5 and interior tiles 8. The order is
    fixed for a given position class.
    """
    check_index(idx, columns, rows)
    last_row_start = columns * (rows - 1)
    up, down = idx - columns, idx + columns
    if idx == 0:
        return (idx + 1, down, down + 1)
    if idx == columns - 1:
        return (idx - 1, down - 1, down)
    if idx == last_row_start:
        return (idx + 1, up, up + 1)
    if idx == columns * rows - 1:
        return (idx - 1, up, up - 1)
    if idx < columns:  # top row
        return (idx - 1, idx + 1, down - 1, down, down + 1)
    if idx % columns == 0:  # left column
        return (up, up + 1, idx + 1, down + 1, down)
    if idx % columns == columns - 1:  # right column
        return (up, up - 1, idx - 1, down - 1, down)
    if idx > last_row_start:  # bottom row
        return (idx - 1, up - 1, up, up + 1, idx + 1)
    return (up - 1, up, up + 1, idx + 1, down + 1, down, down - 1, idx - 1)


def touching_mine_count(idx: int, mines: Iterable[int], columns: int, rows: int) -> int:
    mine_set = mines if isinstance(mines, (set, frozenset)) else set(mines)
    return sum(1 for n in neighbors(idx, columns, rows) if n in mine_set)


def mine_counts(mines: Iterable[int], columns: int, rows: int) -> List[int]:
    mine_set = frozenset(mines)
    return [touching_mine_count(i, mine_set, columns, rows) for i in range(columns * rows)]
