from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Set, Tuple

from .errors import Reason, RuleViolation

BOARD_SIZE = 9
WALLS_PER_PLAYER = {2: 10, 4: 5}

# Direction letters -> (dr, dc). North is row 0.
DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "N": (-1, 0),
    "S": (1, 0),
    "E": (0, 1),
    "W": (0, -1),
}


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def offset(self, dr: int, dc: int) -> "Position":
        return Position(self.row + dr, self.col + dc)

    def manhattan(self, other: "Position") -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)


@dataclass(frozen=True)
class WallSegment:
    row: int  # top-left cell (anchor) of the 2x2 block the wall sits between
    col: int
    horizontal: bool  # True => blocks vertical movement between rows row and row+1
    owner: int | None = field(default=None, compare=False)

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)

    @property
    def orientation(self) -> str:
        return "H" if self.horizontal else "V"

    def key(self) -> Tuple[int, int, bool]:
        return (self.row, self.col, self.horizontal)

    def overlaps(self, other: "WallSegment") -> bool:
        if (self.row, self.col) == (other.row, other.col):
            # identical, or crossing at the same intersection
            return True
        if self.horizontal != other.horizontal:
            return False
        if self.horizontal:
            return self.row == other.row and abs(self.col - other.col) < 2
        return self.col == other.col and abs(self.row - other.row) < 2


@dataclass(frozen=True)
class Move:
    kind: str  # 'pawn' or 'wall'
    to: Position | None = None
    wall: WallSegment | None = None
    direction: str | None = None  # N/S/E/W when the landing is left to the rules

    @staticmethod
    def step(direction: str) -> "Move":
        direction = direction.upper()
        if direction not in DIRECTIONS:
            raise RuleViolation(Reason.INVALID_FORMAT, "Invalid direction. Use N/S/E/W.")
        return Move(kind="pawn", direction=direction)

    @staticmethod
    def pawn(to: Position, direction: str | None = None) -> "Move":
        return Move(kind="pawn", to=to, direction=direction)

    @staticmethod
    def place(row: int, col: int, orientation: str) -> "Move":
        orientation = orientation.upper()
        if orientation not in ("H", "V"):
            raise RuleViolation(Reason.INVALID_FORMAT, "Orientation must be H or V.")
        return Move(kind="wall", wall=WallSegment(row, col, orientation == "H"))

    def same_action(self, other: "Move") -> bool:
        """Compare by effect: target square or wall placement."""
        if self.kind != other.kind:
            return False
        if self.kind == "wall":
            return self.wall == other.wall
        return self.to == other.to


@dataclass(frozen=True)
class CellView:
    position: Position
    blocked: FrozenSet[str]  # subset of N/S/E/W sides closed by a wall
    occupant: int | None  # player index, None when empty


def start_positions(num_players: int, size: int = BOARD_SIZE) -> Dict[int, Position]:
    if num_players not in (2, 4):
        raise ValueError("Only 2 or 4 players supported")
    mid = size // 2
    # P0: North -> South, P1: South -> North, P2: West -> East, P3: East -> West
    pawns = {0: Position(0, mid), 1: Position(size - 1, mid)}
    if num_players == 4:
        pawns[2] = Position(mid, 0)
        pawns[3] = Position(mid, size - 1)
    return pawns


@dataclass
class Board:
    """Grid state only: pawn squares and blocked edges. No game rules here."""

    size: int = BOARD_SIZE
    pawns: Dict[int, Position] = field(default_factory=dict)
    walls: List[WallSegment] = field(default_factory=list)
    # (r, c) in blocked_south => edge (r,c)-(r+1,c) is closed
    blocked_south: Set[Tuple[int, int]] = field(default_factory=set)
    # (r, c) in blocked_east => edge (r,c)-(r,c+1) is closed
    blocked_east: Set[Tuple[int, int]] = field(default_factory=set)

    @staticmethod
    def new(num_players: int = 2, size: int = BOARD_SIZE) -> "Board":
        if size < 3 or size % 2 == 0:
            raise ValueError("Board size must be odd and at least 3")
        return Board(size=size, pawns=start_positions(num_players, size))

    @property
    def num_players(self) -> int:
        return len(self.pawns)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.row < self.size and 0 <= pos.col < self.size

    def wall_in_bounds(self, wall: WallSegment) -> bool:
        return 0 <= wall.row < self.size - 1 and 0 <= wall.col < self.size - 1

    def pawn_position(self, player: int) -> Position:
        return self.pawns[player]

    def move_pawn(self, player: int, pos: Position) -> None:
        self.pawns[player] = pos

    def occupant(self, pos: Position) -> int | None:
        for player, p in self.pawns.items():
            if p == pos:
                return player
        return None

    def is_occupied(self, pos: Position) -> bool:
        return self.occupant(pos) is not None

    def place_wall_segment(self, wall: WallSegment) -> None:
        if not self.wall_in_bounds(wall):
            raise RuleViolation(Reason.OUT_OF_BOUNDS, "Wall must sit on an inner intersection.")
        r, c = wall.row, wall.col
        if wall.horizontal:
            self.blocked_south.update({(r, c), (r, c + 1)})
        else:
            self.blocked_east.update({(r, c), (r + 1, c)})
        self.walls.append(wall)

    def is_edge_blocked(self, a: Position, b: Position) -> bool:
        if a.manhattan(b) != 1:
            raise ValueError(f"{a} and {b} are not adjacent")
        if a.col == b.col:
            top = min(a.row, b.row)
            return (top, a.col) in self.blocked_south
        left = min(a.col, b.col)
        return (a.row, left) in self.blocked_east

    def snapshot_copy(self) -> "Board":
        return Board(
            size=self.size,
            pawns=dict(self.pawns),
            walls=list(self.walls),
            blocked_south=set(self.blocked_south),
            blocked_east=set(self.blocked_east),
        )

    def blocked_sides(self, pos: Position) -> FrozenSet[str]:
        r, c = pos.row, pos.col
        sides = set()
        if (r - 1, c) in self.blocked_south:
            sides.add("N")
        if (r, c) in self.blocked_south:
            sides.add("S")
        if (r, c) in self.blocked_east:
            sides.add("E")
        if (r, c - 1) in self.blocked_east:
            sides.add("W")
        return frozenset(sides)

    def cells(self) -> List[CellView]:
        return [
            CellView(Position(r, c), self.blocked_sides(Position(r, c)), self.occupant(Position(r, c)))
            for r in range(self.size)
            for c in range(self.size)
        ]

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "pawns": {str(i): {"row": p.row, "col": p.col} for i, p in sorted(self.pawns.items())},
            "walls": [
                {"row": w.row, "col": w.col, "orientation": w.orientation, "owner": w.owner}
                for w in sorted(self.walls, key=WallSegment.key)
            ],
        }
