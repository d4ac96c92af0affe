from __future__ import annotations

import re
from typing import List, Optional

from pydantic import ValidationError

from packages.core.guidelines import REQUIRED_FIELDS
from packages.core.schemas.identifiers import ProductID
from packages.core.schemas.suggestion import GuidelineFields, Suggestion, SuggestionAction

SUGGESTION_PATTERN = re.compile(r"<\s*([A-Za-z]+)\s*,([^<>]*)>")

_ACTIONS = {
    "I": SuggestionAction.INSERT,
    "INSERT": SuggestionAction.INSERT,
    "E": SuggestionAction.ELIMINATE,
    "ELIMINATE": SuggestionAction.ELIMINATE,
    "M": SuggestionAction.MODIFY,
    "MODIFY": SuggestionAction.MODIFY,
}


def _parse_one(action_token: str, body: str) -> Optional[Suggestion]:
    action = _ACTIONS.get(action_token.strip().upper())
    if action is None:
        return None
    parts = [part.strip() for part in body.split(",")]
    product_code, raw_fields = parts[0], parts[1:]
    if len(raw_fields) > REQUIRED_FIELDS:
        # free-text instructions may contain commas
        head = raw_fields[: REQUIRED_FIELDS - 1]
        raw_fields = head + [", ".join(raw_fields[REQUIRED_FIELDS - 1 :])]

    fields = None
    if action is SuggestionAction.INSERT:
        if len(raw_fields) < REQUIRED_FIELDS:
            return None
        fields = GuidelineFields.from_fields(raw_fields[:REQUIRED_FIELDS])
    elif action is SuggestionAction.MODIFY:
        padded = (raw_fields + [""] * REQUIRED_FIELDS)[:REQUIRED_FIELDS]
        fields = GuidelineFields.from_fields(padded)

    try:
        return Suggestion(
            action=action,
            product_id=ProductID(code=product_code),
            guideline_fields=fields,
        )
    except ValidationError:
        return None


def parse_suggestions(text: Optional[str]) -> List[Suggestion]:
    """Extract ``<ACTION, product[, fields...]>`` items, skipping malformed ones."""
    if not text:
        return []
    suggestions: List[Suggestion] = []
    for match in SUGGESTION_PATTERN.finditer(text):
        suggestion = _parse_one(match.group(1), match.group(2))
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions


__all__ = ["SUGGESTION_PATTERN", "parse_suggestions"]
