from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Callable, List, Sequence

from .errors import AmbiguousJump, Reason, RuleViolation
from .paths import has_path
from .state import Board, DIRECTIONS, Move, Position, WallSegment

# Legality lives here and only here: human turns, hotseat validation and the
# AI search all go through these functions.

DiagonalChooser = Callable[[Sequence[Position]], Position]


@dataclass(frozen=True)
class Goal:
    axis: str  # 'row' or 'col'
    line: int

    def reached(self, pos: Position) -> bool:
        return (pos.row if self.axis == "row" else pos.col) == self.line

    def distance(self, pos: Position) -> int:
        return abs((pos.row if self.axis == "row" else pos.col) - self.line)


def goal_for(player: int, num_players: int, size: int) -> Goal:
    last = size - 1
    if player == 0:
        return Goal("row", last)
    if player == 1:
        return Goal("row", 0)
    if num_players == 4 and player == 2:
        return Goal("col", last)
    if num_players == 4 and player == 3:
        return Goal("col", 0)
    raise ValueError(f"No goal for player {player} in a {num_players}-player game")


def board_goal(board: Board, player: int) -> Goal:
    return goal_for(player, board.num_players, board.size)


def has_won(board: Board, player: int) -> bool:
    return board_goal(board, player).reached(board.pawn_position(player))


def distance_to_goal(board: Board, player: int, pos: Position | None = None) -> int:
    """Row/column offset to the goal edge, ignoring walls."""
    if pos is None:
        pos = board.pawn_position(player)
    return board_goal(board, player).distance(pos)


def first_option(options: Sequence[Position]) -> Position:
    return options[0]


# --------------------------------------------------------------------------
# Pawn moves
# --------------------------------------------------------------------------


def step(pos: Position, direction: str) -> Position:
    dr, dc = DIRECTIONS[direction]
    return pos.offset(dr, dc)


def _open(board: Board, src: Position, dst: Position) -> bool:
    """dst is on the board, reachable from the adjacent src, and empty."""
    return (
        board.in_bounds(dst)
        and not board.is_edge_blocked(src, dst)
        and not board.is_occupied(dst)
    )


def _jump_landings(board: Board, frm: Position, pivot: Position) -> List[Position]:
    dr, dc = pivot.row - frm.row, pivot.col - frm.col
    straight = pivot.offset(dr, dc)
    if _open(board, pivot, straight):
        return [straight]
    # straight jump blocked -> sidestep diagonally around the pivot
    if dr != 0:
        sides = [pivot.offset(0, -1), pivot.offset(0, 1)]
    else:
        sides = [pivot.offset(-1, 0), pivot.offset(1, 0)]
    options = [p for p in sides if _open(board, pivot, p)]
    if not options:
        raise RuleViolation(Reason.NO_LEGAL_JUMP)
    return options


def _is_diagonal_jump(board: Board, frm: Position, pivot: Position, to: Position) -> bool:
    if not board.is_occupied(pivot) or board.is_edge_blocked(frm, pivot):
        return False
    straight = pivot.offset(pivot.row - frm.row, pivot.col - frm.col)
    if _open(board, pivot, straight):
        return False
    return _open(board, pivot, to)


def landing_options(board: Board, player: int, to: Position) -> List[Position]:
    """Every square the request could end on; two entries only for a diagonal fork."""
    frm = board.pawn_position(player)
    if not board.in_bounds(to):
        raise RuleViolation(Reason.OUT_OF_BOUNDS)
    dr, dc = to.row - frm.row, to.col - frm.col
    adr, adc = abs(dr), abs(dc)

    if adr + adc == 1:
        if board.is_edge_blocked(frm, to):
            raise RuleViolation(Reason.WALL_BLOCKED)
        if not board.is_occupied(to):
            return [to]
        return _jump_landings(board, frm, to)

    if (adr, adc) in ((2, 0), (0, 2)):
        mid = Position(frm.row + dr // 2, frm.col + dc // 2)
        if not board.is_occupied(mid):
            raise RuleViolation(Reason.NO_LEGAL_JUMP, "Nothing to jump over.")
        if board.is_edge_blocked(frm, mid) or board.is_edge_blocked(mid, to):
            raise RuleViolation(Reason.WALL_BLOCKED)
        if board.is_occupied(to):
            raise RuleViolation(Reason.OCCUPIED)
        return [to]

    if adr == 1 and adc == 1:
        for pivot in (Position(frm.row, to.col), Position(to.row, frm.col)):
            if _is_diagonal_jump(board, frm, pivot, to):
                return [to]
        raise RuleViolation(Reason.NO_LEGAL_JUMP)

    raise RuleViolation(Reason.INVALID_FORMAT, "Pawns move one square or jump.")


def resolve_move(
    board: Board, player: int, to: Position, choose: DiagonalChooser | None = None
) -> Position:
    options = landing_options(board, player, to)
    if len(options) == 1:
        return options[0]
    if choose is None:
        raise AmbiguousJump(options)
    picked = choose(options)
    if picked not in options:
        raise RuleViolation(Reason.INVALID_FORMAT, "Pick one of the offered diagonals.")
    return picked


def legal_pawn_moves(board: Board, player: int) -> List[Move]:
    frm = board.pawn_position(player)
    moves: List[Move] = []
    seen = set()
    for direction in DIRECTIONS:
        try:
            options = landing_options(board, player, step(frm, direction))
        except RuleViolation:
            continue
        for pos in options:
            if pos not in seen:
                seen.add(pos)
                moves.append(Move.pawn(pos, direction))
    return moves


# --------------------------------------------------------------------------
# Walls
# --------------------------------------------------------------------------


def check_wall(board: Board, wall: WallSegment) -> None:
    if not board.wall_in_bounds(wall):
        raise RuleViolation(Reason.OUT_OF_BOUNDS, "Wall must sit on an inner intersection.")
    for existing in board.walls:
        if wall.overlaps(existing):
            raise RuleViolation(Reason.OVERLAP)
    scratch = board.snapshot_copy()
    scratch.place_wall_segment(wall)
    for player, pos in scratch.pawns.items():
        if not has_path(scratch, pos, board_goal(scratch, player).reached):
            raise RuleViolation(Reason.PATH_BLOCKED)


def can_place_wall(board: Board, wall: WallSegment) -> bool:
    try:
        check_wall(board, wall)
    except RuleViolation:
        return False
    return True


def legal_wall_moves(board: Board, player: int) -> List[Move]:
    moves: List[Move] = []
    for r in range(board.size - 1):
        for c in range(board.size - 1):
            for horizontal in (True, False):
                wall = WallSegment(r, c, horizontal, owner=player)
                if can_place_wall(board, wall):
                    moves.append(Move(kind="wall", wall=wall))
    return moves


def legal_moves(board: Board, player: int, walls_remaining: int) -> List[Move]:
    moves = legal_pawn_moves(board, player)
    if walls_remaining > 0:
        moves += legal_wall_moves(board, player)
    return moves


# --------------------------------------------------------------------------
# Validate-then-apply
# --------------------------------------------------------------------------


def resolve(
    board: Board,
    player: int,
    move: Move,
    walls_remaining: int,
    choose: DiagonalChooser | None = None,
) -> Move:
    """Fully validate a requested action and return its concrete form.

    Pawn requests come back with a definite landing square, walls with their
    owner filled in. Raises RuleViolation (or AmbiguousJump) without touching
    the board.
    """
    if move.kind == "pawn":
        if move.to is not None:
            target = move.to
        elif move.direction in DIRECTIONS:
            target = step(board.pawn_position(player), move.direction)
        else:
            raise RuleViolation(Reason.INVALID_FORMAT, "Move needs a direction or target.")
        landing = resolve_move(board, player, target, choose)
        return Move.pawn(landing, move.direction)
    if move.kind == "wall" and move.wall is not None:
        if walls_remaining <= 0:
            raise RuleViolation(Reason.NO_WALLS_REMAINING)
        check_wall(board, move.wall)
        return Move(kind="wall", wall=replace(move.wall, owner=player))
    raise RuleViolation(Reason.INVALID_FORMAT)


def apply_move(board: Board, player: int, move: Move) -> None:
    """Mutate board with an already-resolved move."""
    if move.kind == "pawn" and move.to is not None:
        board.move_pawn(player, move.to)
    elif move.kind == "wall" and move.wall is not None:
        board.place_wall_segment(move.wall)
    else:
        raise RuleViolation(Reason.INVALID_FORMAT)
