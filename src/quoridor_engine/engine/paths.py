from __future__ import annotations
from collections import deque
from typing import Callable, Iterator

from .state import Board, DIRECTIONS, Position

# Reachability over the cell grid. Pawns are ignored: only walls cut edges.


def neighbours(board: Board, pos: Position) -> Iterator[Position]:
    """Yield the 4-adjacent cells reachable from pos without crossing a wall."""
    for dr, dc in DIRECTIONS.values():
        nxt = pos.offset(dr, dc)
        if board.in_bounds(nxt) and not board.is_edge_blocked(pos, nxt):
            yield nxt


def has_path(board: Board, start: Position, reached: Callable[[Position], bool]) -> bool:
    return shortest_distance(board, start, reached) is not None


def shortest_distance(
    board: Board, start: Position, reached: Callable[[Position], bool]
) -> int | None:
    """BFS length from start to the nearest cell satisfying reached, or None."""
    if reached(start):
        return 0
    seen = {start}
    q = deque([(start, 0)])
    while q:
        cur, dist = q.popleft()
        for nxt in neighbours(board, cur):
            if nxt in seen:
                continue
            if reached(nxt):
                return dist + 1
            seen.add(nxt)
            q.append((nxt, dist + 1))
    return None
