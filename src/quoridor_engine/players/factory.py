from __future__ import annotations
import random
from typing import Callable, Dict, List

from .agents.base import Agent
from .agents.greedy_agent import GreedyAgent
from .agents.human_agent import HumanAgent
from .agents.llm_agent import LLMAgent
from .agents.minimax_agent import MinimaxAgent
from .agents.random_agent import RandomAgent
from ..config import Settings

Builder = Callable[[List[str], Settings], Agent]


def _human(args: List[str], settings: Settings) -> Agent:
    return HumanAgent(name=args[0] if args else "Human")


def _random(args: List[str], settings: Settings) -> Agent:
    seed = int(args[0]) if args else settings.seed
    return RandomAgent(
        rng=random.Random(seed), window=settings.wall_window, cap=settings.candidate_cap
    )


def _greedy(args: List[str], settings: Settings) -> Agent:
    return GreedyAgent(window=settings.wall_window, cap=settings.candidate_cap)


def _minimax(args: List[str], settings: Settings) -> Agent:
    depth = int(args[0]) if args else settings.ai_depth
    return MinimaxAgent(
        depth=depth,
        window=settings.wall_window,
        cap=settings.candidate_cap,
        verbose=settings.print_search,
    )


def _llm(args: List[str], settings: Settings) -> Agent:
    model = args[0] if args else settings.openai_model
    max_attempts = int(args[1]) if len(args) > 1 else 3
    return LLMAgent(model=model, max_attempts=max_attempts)


_TIERS = {"1": "random", "2": "greedy", "3": "minimax"}


class AgentFactory:
    _registry: Dict[str, Builder] = {}

    @classmethod
    def register(cls, name: str, builder: Builder) -> None:
        cls._registry[name] = builder

    @classmethod
    def available(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def create(cls, config_str: str, settings: Settings | None = None) -> Agent:
        """
        Create an agent from a configuration string.
        Format: "type:arg1,arg2" or just "type"
        Examples:
            - "human" / "human:Alice"
            - "random" / "random:42" (seed)
            - "greedy"
            - "minimax" / "minimax:2" (depth)
            - "ai:1" .. "ai:3" (difficulty tier)
            - "llm:gpt-4o,5" (model, max_attempts)
        """
        settings = settings or Settings()
        parts = config_str.split(":", 1)
        agent_type = parts[0].strip().lower()
        args_str = parts[1] if len(parts) > 1 else ""
        args = [a.strip() for a in args_str.split(",")] if args_str else []

        if agent_type == "ai":
            tier = args[0] if args else "3"
            if tier not in _TIERS:
                raise ValueError(f"Unknown difficulty: {tier}. Use 1, 2 or 3.")
            agent_type, args = _TIERS[tier], []

        if agent_type not in cls._registry:
            raise ValueError(f"Unknown agent type: {agent_type}. Available: {cls.available()}")

        try:
            return cls._registry[agent_type](args, settings)
        except ValueError as e:
            raise ValueError(f"Failed to create agent '{agent_type}' with args {args}: {e}")


# Register default agents
AgentFactory.register("human", _human)
AgentFactory.register("random", _random)
AgentFactory.register("greedy", _greedy)
AgentFactory.register("minimax", _minimax)
AgentFactory.register("llm", _llm)
