from __future__ import annotations

from typing import Literal

from packages.consultation.services import DecisionMakingAI


def get_decision_ai(mode: Literal["mock", "llm"] = "mock") -> DecisionMakingAI:
    """
    Raises:
        ValueError: unknown mode
    """
    # lazy imports keep the LLM client out of mock runs
    if mode == "mock":
        from packages.advisors.mock import MockDecisionMakingAI

        return MockDecisionMakingAI()
    if mode == "llm":
        from packages.advisors.llm_advisor import LLMDecisionMakingAI

        return LLMDecisionMakingAI()
    raise ValueError(f"Unknown AI mode: {mode!r}. Known modes: ['mock', 'llm']")


__all__ = ["get_decision_ai"]
