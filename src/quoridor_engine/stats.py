from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Protocol


class StatsRecorder(Protocol):
    def record_game(self, name: str, won: bool, action_count: int, elapsed_ms: int) -> None: ...


@dataclass
class PlayerTotals:
    games: int = 0
    wins: int = 0
    actions: int = 0
    elapsed_ms: int = 0


class MatchStatistics:
    """In-memory per-name totals across the matches of one process."""

    def __init__(self) -> None:
        self._totals: Dict[str, PlayerTotals] = {}

    def record_game(self, name: str, won: bool, action_count: int, elapsed_ms: int) -> None:
        t = self._totals.setdefault(name, PlayerTotals())
        t.games += 1
        if won:
            t.wins += 1
        t.actions += action_count
        t.elapsed_ms += elapsed_ms

    def totals(self, name: str) -> PlayerTotals | None:
        return self._totals.get(name)

    def summary(self, name: str) -> str:
        t = self._totals.get(name)
        if t is None or t.games == 0:
            return f"{name}: no games played."
        word = "games" if t.games > 1 else "game"
        return (
            f"{name} played {t.games} {word}, winning {t.wins}. "
            f"Average actions: {t.actions / t.games:.1f}, "
            f"average time: {t.elapsed_ms / t.games:.0f} ms."
        )

    def report(self) -> str:
        if not self._totals:
            return "No games recorded."
        return "\n".join(self.summary(name) for name in self._totals)
