"""Grid coordinates for the Pentos board."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple


# North, east, south, west
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


@dataclass(frozen=True, order=True)
class Cell:
    i: int
    j: int

    def neighbors(self) -> Tuple["Cell", ...]:
        """The four axis neighbors. They may lie outside the board."""
        return tuple(Cell(self.i + di, self.j + dj) for di, dj in DIRECTIONS)

    def shifted(self, di: int, dj: int) -> "Cell":
        return Cell(self.i + di, self.j + dj)

    def __repr__(self) -> str:
        return f"Cell({self.i}, {self.j})"


def in_bounds(cell: Cell, side: int) -> bool:
    return 0 <= cell.i < side and 0 <= cell.j < side


def on_perimeter(cell: Cell, side: int) -> bool:
    """True for cells on (or beyond) the outer ring of a side x side board."""
    return cell.i <= 0 or cell.j <= 0 or cell.i >= side - 1 or cell.j >= side - 1


def neighbor_set(cells: Iterable[Cell]) -> Set[Cell]:
    """Distinct cells adjacent to any member of `cells`; members may be included."""
    out: Set[Cell] = set()
    for c in cells:
        out.update(c.neighbors())
    return out


def trace_path(end: Cell, came: Dict[Cell, Cell]) -> List[Cell]:
    """Walk a predecessor map back from `end` to the search root."""
    out: List[Cell] = [end]
    cur: Optional[Cell] = end
    while cur in came:
        cur = came[cur]
        out.append(cur)
    out.reverse()
    return out
