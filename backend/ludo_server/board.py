"""Static board geometry for the classic 15x15 Ludo layout.

Every color walks the same 52-cell outer track, entering it at its own
start cell and leaving it one cell short of a full lap for a private
home stretch that ends on the shared centre cell. A token's position is
always stored relative to its owner's path; ``cell_of`` turns that into an
absolute (row, col) cell so tokens of different colors can be compared.
"""
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

Cell = Tuple[int, int]

POOL = -1


class Color(str, Enum):
    RED = 'red'
    GREEN = 'green'
    BLUE = 'blue'
    YELLOW = 'yellow'


# Assignment order for players joining a room
COLOR_ORDER: Tuple[Color, ...] = (Color.RED, Color.GREEN, Color.BLUE, Color.YELLOW)

# Outer track, clockwise from red's start cell
TRACK: Tuple[Cell, ...] = (
    (6, 1), (6, 2), (6, 3), (6, 4), (6, 5),
    (5, 6), (4, 6), (3, 6), (2, 6), (1, 6), (0, 6),
    (0, 7), (0, 8),
    (1, 8), (2, 8), (3, 8), (4, 8), (5, 8),
    (6, 9), (6, 10), (6, 11), (6, 12), (6, 13), (6, 14),
    (7, 14), (8, 14),
    (8, 13), (8, 12), (8, 11), (8, 10), (8, 9),
    (9, 8), (10, 8), (11, 8), (12, 8), (13, 8), (14, 8),
    (14, 7), (14, 6),
    (13, 6), (12, 6), (11, 6), (10, 6), (9, 6),
    (8, 5), (8, 4), (8, 3), (8, 2), (8, 1), (8, 0),
    (7, 0), (6, 0),
)

TRACK_START: Dict[Color, int] = {
    Color.RED: 0,
    Color.GREEN: 13,
    Color.BLUE: 26,
    Color.YELLOW: 39,
}

# Cells of the track a token walks before turning into its home stretch
TRACK_STEPS = len(TRACK) - 1

CENTER: Cell = (7, 7)

HOME_STRETCH: Dict[Color, Tuple[Cell, ...]] = {
    Color.RED: ((7, 1), (7, 2), (7, 3), (7, 4), (7, 5), (7, 6), CENTER),
    Color.GREEN: ((1, 7), (2, 7), (3, 7), (4, 7), (5, 7), (6, 7), CENTER),
    Color.BLUE: ((7, 13), (7, 12), (7, 11), (7, 10), (7, 9), (7, 8), CENTER),
    Color.YELLOW: ((13, 7), (12, 7), (11, 7), (10, 7), (9, 7), (8, 7), CENTER),
}

# Starting-pool slots, indexed by token index
HOME_SLOTS: Dict[Color, Tuple[Cell, ...]] = {
    Color.RED: ((2, 2), (2, 4), (4, 2), (4, 4)),
    Color.GREEN: ((2, 10), (2, 12), (4, 10), (4, 12)),
    Color.BLUE: ((10, 10), (10, 12), (12, 10), (12, 12)),
    Color.YELLOW: ((10, 2), (10, 4), (12, 2), (12, 4)),
}

SAFE_CELL_RULES = ('overlap', 'entry')


def classic_path(color: Color) -> List[Cell]:
    start = TRACK_START[color]
    ring = [TRACK[(start + step) % len(TRACK)] for step in range(TRACK_STEPS)]
    return ring + list(HOME_STRETCH[color])


class BoardGeometry:
    """Per-color paths, pool slots and the safe-cell set derived from them.

    ``safe_rule`` picks how safe cells are derived:

    - ``overlap``: any cell that lies on the paths of two or more colors.
    - ``entry``: the cell where each color's path begins.
    """

    def __init__(
        self,
        paths: Dict[Color, Sequence[Cell]],
        home_slots: Dict[Color, Sequence[Cell]],
        safe_rule: str = 'overlap',
    ):
        lengths = {len(p) for p in paths.values()}
        if len(lengths) != 1:
            raise ValueError('all color paths must have the same length')
        if safe_rule not in SAFE_CELL_RULES:
            raise ValueError(f'unknown safe cell rule: {safe_rule!r}')
        self.paths: Dict[Color, Tuple[Cell, ...]] = {c: tuple(p) for c, p in paths.items()}
        self.home_slots: Dict[Color, Tuple[Cell, ...]] = {c: tuple(s) for c, s in home_slots.items()}
        self.safe_rule = safe_rule
        self.finish = lengths.pop() - 1
        self.safe_cells: FrozenSet[Cell] = self._derive_safe_cells()

    @classmethod
    def classic(cls, safe_rule: str = 'overlap') -> 'BoardGeometry':
        return cls({c: classic_path(c) for c in COLOR_ORDER}, HOME_SLOTS, safe_rule=safe_rule)

    def _derive_safe_cells(self) -> FrozenSet[Cell]:
        if self.safe_rule == 'entry':
            return frozenset(path[0] for path in self.paths.values())
        seen: Dict[Cell, int] = {}
        for path in self.paths.values():
            for cell in set(path):
                seen[cell] = seen.get(cell, 0) + 1
        return frozenset(cell for cell, count in seen.items() if count > 1)

    def cell_of(self, color: Color, offset: int) -> Optional[Cell]:
        """Absolute cell for a relative offset, or None while in the pool."""
        if offset == POOL:
            return None
        if not 0 <= offset <= self.finish:
            raise ValueError(f'offset {offset} outside path of {color.value}')
        return self.paths[color][offset]

    def is_safe(self, cell: Optional[Cell]) -> bool:
        return cell is not None and cell in self.safe_cells

    def home_slot(self, color: Color, token_index: int) -> Cell:
        slots = self.home_slots[color]
        return slots[token_index % len(slots)]

    def token_cell(self, color: Color, token_index: int, offset: int) -> Cell:
        """Where a renderer should draw a token: its pool slot or its path cell."""
        if offset == POOL:
            return self.home_slot(color, token_index)
        return self.cell_of(color, offset)
