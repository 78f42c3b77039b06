from __future__ import annotations
import math
from typing import Dict, List, Mapping, Tuple

from ..engine import rules
from ..engine.state import Board, Move, WallSegment

# Search over speculative boards. Every node gets its own snapshot_copy and
# legality always comes from engine.rules, never from a shortcut here.

DEFAULT_DEPTH = 3
DEFAULT_WINDOW = 5
DEFAULT_CAP = 10


def principal_opponent(board: Board, player: int) -> int:
    """The other player in a duel; in 4-player games, the opponent nearest their goal."""
    others = [p for p in sorted(board.pawns) if p != player]
    return min(others, key=lambda p: (rules.distance_to_goal(board, p), p))


def candidate_moves(
    board: Board,
    player: int,
    walls_remaining: int,
    window: int = DEFAULT_WINDOW,
    cap: int = DEFAULT_CAP,
) -> List[Move]:
    """All legal pawn moves plus a bounded sample of legal walls.

    Walls are scanned in a window x window block of intersections centred on
    the principal opponent and stop once the list holds cap entries.
    """
    moves = rules.legal_pawn_moves(board, player)
    if walls_remaining <= 0 or len(moves) >= cap:
        return moves
    opp = board.pawn_position(principal_opponent(board, player))
    span = board.size - 1
    w = min(window, span)
    top = min(max(opp.row - w // 2, 0), span - w)
    left = min(max(opp.col - w // 2, 0), span - w)
    for r in range(top, top + w):
        for c in range(left, left + w):
            for horizontal in (True, False):
                wall = WallSegment(r, c, horizontal, owner=player)
                if rules.can_place_wall(board, wall):
                    moves.append(Move(kind="wall", wall=wall))
                    if len(moves) >= cap:
                        return moves
    return moves


def greedy_score(board: Board, player: int, move: Move) -> int:
    """Lower is better: own goal distance after a step, or wall-to-opponent distance."""
    if move.kind == "pawn":
        return rules.distance_to_goal(board, player, move.to)
    opp = board.pawn_position(principal_opponent(board, player))
    return move.wall.position.manhattan(opp)


def greedy_move(board: Board, player: int, moves: List[Move]) -> Move | None:
    best: Move | None = None
    best_score = math.inf
    for move in moves:
        score = greedy_score(board, player, move)
        if score < best_score:
            best, best_score = move, score
    return best


def evaluate(board: Board, player: int, opponent: int) -> int:
    return rules.distance_to_goal(board, opponent) - rules.distance_to_goal(board, player)


def _simulate(
    board: Board, walls: Mapping[int, int], mover: int, move: Move
) -> Tuple[Board, Dict[int, int]]:
    child = board.snapshot_copy()
    rules.apply_move(child, mover, move)
    child_walls = dict(walls)
    if move.kind == "wall":
        child_walls[mover] -= 1
    return child, child_walls


def minimax(
    board: Board,
    walls: Mapping[int, int],
    depth: int,
    maximizing: bool,
    player: int,
    opponent: int,
    alpha: float,
    beta: float,
    window: int = DEFAULT_WINDOW,
    cap: int = DEFAULT_CAP,
) -> float:
    if depth == 0 or rules.has_won(board, player) or rules.has_won(board, opponent):
        return evaluate(board, player, opponent)

    mover = player if maximizing else opponent
    moves = candidate_moves(board, mover, walls[mover], window, cap)
    if not moves:
        return evaluate(board, player, opponent)

    if maximizing:
        best = -math.inf
        for move in moves:
            child, child_walls = _simulate(board, walls, mover, move)
            score = minimax(child, child_walls, depth - 1, False, player, opponent, alpha, beta, window, cap)
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break  # beta cutoff
        return best

    best = math.inf
    for move in moves:
        child, child_walls = _simulate(board, walls, mover, move)
        score = minimax(child, child_walls, depth - 1, True, player, opponent, alpha, beta, window, cap)
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break  # alpha cutoff
    return best


def score_moves(
    board: Board,
    player: int,
    walls: Mapping[int, int],
    depth: int = DEFAULT_DEPTH,
    window: int = DEFAULT_WINDOW,
    cap: int = DEFAULT_CAP,
) -> List[Tuple[Move, float]]:
    """Minimax value of every root candidate, each searched with a full window."""
    opponent = principal_opponent(board, player)
    scored = []
    for move in candidate_moves(board, player, walls[player], window, cap):
        child, child_walls = _simulate(board, walls, player, move)
        score = minimax(
            child, child_walls, depth - 1, False, player, opponent,
            -math.inf, math.inf, window, cap,
        )
        scored.append((move, score))
    return scored


def best_move(scored: List[Tuple[Move, float]]) -> Tuple[Move | None, float]:
    best: Move | None = None
    best_score = -math.inf
    for move, score in scored:
        if best is None or score > best_score:
            best, best_score = move, score
    return best, best_score
