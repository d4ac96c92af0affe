from __future__ import annotations

from typing import Dict, List, Optional

from packages.advisors.parsing import parse_suggestions
from packages.consultation.services import DecisionMakingAI
from packages.core.errors import BadPromptError, DecisionMakingAIError
from packages.core.schemas.suggestion import Suggestion

DEFAULT_ANSWERS: Dict[str, str] = {
    "pain": (
        "Pain control can be improved while protecting the stomach:\n"
        "<I, 243516578917, AFTERMEALS, 7, 1, 8, HOUR, Take with plenty of water>\n"
        "<M, 640557143200, , , 3, , , >\n"
        "<E, 789012345678>"
    ),
    "glucose": (
        "Glucose remains above target; add a second oral agent:\n"
        "<I, 654321098765, DURINGBREAKFAST, 90, 1, 1, DAY, Swallow whole with breakfast>"
    ),
    "pressure": (
        "Blood pressure is controlled; keep the dose but move the intake to the morning:\n"
        "<M, 112233445566, BEFOREBREAKFAST, , , , , >"
    ),
}


class MockDecisionMakingAI(DecisionMakingAI):
    """Deterministic offline advisor answering from a keyword table."""

    def __init__(self, answers: Optional[Dict[str, str]] = None) -> None:
        self.answers = dict(DEFAULT_ANSWERS if answers is None else answers)
        self.initialized = False

    def initialize(self) -> None:
        if not self.answers:
            raise DecisionMakingAIError("decision making AI has no knowledge base loaded")
        self.initialized = True

    def ask(self, prompt: str) -> str:
        if not self.initialized:
            raise DecisionMakingAIError("decision making AI not initialized")
        lowered = prompt.lower()
        matches = [answer for keyword, answer in sorted(self.answers.items()) if keyword in lowered]
        if not matches:
            raise BadPromptError(
                "prompt does not mention a treatment concern the advisor understands",
                detail={"known_topics": sorted(self.answers)},
            )
        return "\n".join(matches)

    def parse(self, response: str) -> List[Suggestion]:
        return parse_suggestions(response)


__all__ = ["MockDecisionMakingAI", "DEFAULT_ANSWERS"]
