from __future__ import annotations
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

DIAGONAL_POLICIES = ("first", "prompt")


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}")


def _env_flag(key: str) -> bool:
    return os.getenv(key, "0").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    board_size: int = 9
    diagonal_policy: str = "prompt"
    ai_depth: int = 3
    wall_window: int = 5
    candidate_cap: int = 10
    seed: int | None = None
    max_actions: int = 0
    openai_model: str = "gpt-4o-mini"
    print_snapshot: bool = False
    print_search: bool = False

    def validate(self) -> "Settings":
        if self.board_size < 3 or self.board_size % 2 == 0:
            raise ValueError("QUORIDOR_BOARD_SIZE must be odd and at least 3")
        if self.diagonal_policy not in DIAGONAL_POLICIES:
            raise ValueError(f"QUORIDOR_DIAGONAL_POLICY must be one of {DIAGONAL_POLICIES}")
        if self.ai_depth < 1:
            raise ValueError("QUORIDOR_AI_DEPTH must be at least 1")
        if self.wall_window < 1 or self.candidate_cap < 1:
            raise ValueError("QUORIDOR_WALL_WINDOW and QUORIDOR_CANDIDATE_CAP must be positive")
        return self


def load_settings(env_file: str | None = None) -> Settings:
    """Read settings from the environment, after pulling in a local .env.

    Values already present in the environment win over the .env file.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))
    seed_raw = os.getenv("QUORIDOR_SEED")
    return Settings(
        board_size=_env_int("QUORIDOR_BOARD_SIZE", 9),
        diagonal_policy=os.getenv("QUORIDOR_DIAGONAL_POLICY", "prompt").strip().lower(),
        ai_depth=_env_int("QUORIDOR_AI_DEPTH", 3),
        wall_window=_env_int("QUORIDOR_WALL_WINDOW", 5),
        candidate_cap=_env_int("QUORIDOR_CANDIDATE_CAP", 10),
        seed=int(seed_raw) if seed_raw and seed_raw.strip() else None,
        max_actions=_env_int("QUORIDOR_MAX_ACTIONS", 0),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        print_snapshot=_env_flag("PRINT_SNAPSHOT"),
        print_search=_env_flag("PRINT_SEARCH"),
    ).validate()
