import random
from typing import Callable, Dict, List, Optional, Union

from ..config import BLOCK_SIZE
from ..models import SeatCoordinate, SeatingPattern

Coords = List[SeatCoordinate]


def _check_grid(rows: int, columns: int, count: int):
    if rows < 0 or columns < 0 or count < 0:
        raise ValueError("rows, columns and count must be non-negative")


def linear(rows: int, columns: int, count: int) -> Coords:
    """Row-major: row 1 left to right, then row 2, ..."""
    seats: Coords = []
    for r in range(1, rows + 1):
        for c in range(1, columns + 1):
            if len(seats) >= count:
                return seats
            seats.append(SeatCoordinate(r, c))
    return seats


def serpentine(rows: int, columns: int, count: int) -> Coords:
    """Row-major, reversing direction on every other row."""
    seats: Coords = []
    for r in range(rows):
        cols = range(columns) if r % 2 == 0 else range(columns - 1, -1, -1)
        for c in cols:
            if len(seats) >= count:
                return seats
            seats.append(SeatCoordinate(r + 1, c + 1))
    return seats


def block(rows: int, columns: int, count: int, size: int = BLOCK_SIZE) -> Coords:
    """Tiles of size x size in row-major tile order, row-major inside a tile.

    Tiles on the bottom/right edge of an odd grid are clipped.
    """
    if size < 1:
        raise ValueError("block size must be >= 1")
    seats: Coords = []
    for br in range(0, rows, size):
        for bc in range(0, columns, size):
            for r in range(br, min(br + size, rows)):
                for c in range(bc, min(bc + size, columns)):
                    if len(seats) >= count:
                        return seats
                    seats.append(SeatCoordinate(r + 1, c + 1))
    return seats


def randomized(rows: int, columns: int, count: int,
               rng: Optional[random.Random] = None) -> Coords:
    """Fisher-Yates shuffle of every cell, then the first `count`."""
    rng = rng or random.Random()
    cells = linear(rows, columns, rows * columns)
    for i in range(len(cells) - 1, 0, -1):
        j = rng.randint(0, i)
        cells[i], cells[j] = cells[j], cells[i]
    return cells[:count]


_DETERMINISTIC: Dict[SeatingPattern, Callable[[int, int, int], Coords]] = {
    SeatingPattern.LINEAR: linear,
    SeatingPattern.SERPENTINE: serpentine,
    SeatingPattern.BLOCK: block,
}


def generate_coordinates(rows: int, columns: int, count: int,
                         pattern: Union[SeatingPattern, str, None] = SeatingPattern.LINEAR,
                         seed: Optional[int] = None,
                         rng: Optional[random.Random] = None) -> Coords:
    """Ordered seat coordinates for `count` students in a rows x columns room.

    Returns min(count, rows*columns) distinct coordinates. Unknown pattern
    names fall back to linear. `seed`/`rng` only affect `randomized`.
    """
    _check_grid(rows, columns, count)
    p = SeatingPattern.parse(pattern)
    if p is SeatingPattern.RANDOMIZED:
        if rng is None:
            rng = random.Random(seed)
        return randomized(rows, columns, count, rng=rng)
    return _DETERMINISTIC[p](rows, columns, count)
