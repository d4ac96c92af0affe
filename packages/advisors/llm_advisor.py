from __future__ import annotations

import logging
from typing import List, Optional

from packages.advisors.parsing import parse_suggestions
from packages.consultation.services import DecisionMakingAI
from packages.core.errors import BadPromptError, DecisionMakingAIError
from packages.core.llm import LLMClient
from packages.core.schemas.suggestion import Suggestion

logger = logging.getLogger(__name__)

BAD_PROMPT_MARKER = "BAD_PROMPT"

SYSTEM_PROMPT = (
    "You support a doctor adjusting a patient's drug treatment.\n"
    "Rules:\n"
    "- Explain your reasoning briefly, then list each proposed change on its own line.\n"
    "- Insert a medicine: <I, productCode, dayMoment, duration, dose, frequency, frequencyUnit, instructions>\n"
    "- Modify a medicine: <M, productCode, dayMoment, duration, dose, frequency, frequencyUnit, instructions>"
    " leaving unchanged positions empty.\n"
    "- Eliminate a medicine: <E, productCode>\n"
    "- dayMoment is one of BEFOREBREAKFAST, DURINGBREAKFAST, AFTERBREAKFAST, BEFORELUNCH, "
    "DURINGLUNCH, AFTERLUNCH, BEFOREDINNER, DURINGDINNER, AFTERDINNER, BEFOREMEALS, "
    "DURINGMEALS, AFTERMEALS.\n"
    "- frequencyUnit is one of HOUR, DAY, WEEK, MONTH. duration is in days.\n"
    f"- If the request is unclear or inconsistent reply only with '{BAD_PROMPT_MARKER}: <reason>'."
)


class LLMDecisionMakingAI(DecisionMakingAI):
    def __init__(self, llm: Optional[LLMClient] = None) -> None:
        self.llm = llm or LLMClient()

    def initialize(self) -> None:
        if not self.llm.is_available():
            raise DecisionMakingAIError("decision making AI unavailable: OPENAI_API_KEY is not set")

    def ask(self, prompt: str) -> str:
        try:
            response = self.llm.complete(prompt, system_prompt=SYSTEM_PROMPT)
        except RuntimeError as exc:
            logger.warning("LLM call failed: %s", exc)
            raise DecisionMakingAIError(str(exc)) from exc

        stripped = (response or "").strip()
        if stripped.upper().startswith(BAD_PROMPT_MARKER):
            reason = stripped[len(BAD_PROMPT_MARKER):].lstrip(" :") or "prompt is unclear"
            raise BadPromptError(reason, detail={"prompt": prompt})
        return response

    def parse(self, response: str) -> List[Suggestion]:
        return parse_suggestions(response)


__all__ = ["LLMDecisionMakingAI", "SYSTEM_PROMPT", "BAD_PROMPT_MARKER"]
