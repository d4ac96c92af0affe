from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, model_validator

from packages.core.schemas.dosage import GUIDELINE_FIELD_NAMES, TakingGuideline
from packages.core.schemas.identifiers import ProductID


class SuggestionAction(str, Enum):
    INSERT = "INSERT"
    ELIMINATE = "ELIMINATE"
    MODIFY = "MODIFY"


class GuidelineFields(BaseModel):
    """Raw guideline values proposed by the AI, by name.

    ``None`` means the AI did not propose a value for that field. Values stay
    raw strings; they are validated when the doctor submits them as a line.
    """
    model_config = ConfigDict(frozen=True)

    day_moment: Optional[str] = None
    duration: Optional[str] = None
    dose: Optional[str] = None
    frequency: Optional[str] = None
    frequency_unit: Optional[str] = None
    instructions: Optional[str] = None

    @classmethod
    def from_fields(cls, raw: Sequence[str]) -> "GuidelineFields":
        values = {}
        for name, token in zip(GUIDELINE_FIELD_NAMES, raw):
            token = token.strip() if isinstance(token, str) else None
            values[name] = token or None
        return cls(**values)

    def to_fields(self) -> List[str]:
        return [getattr(self, name) or "" for name in GUIDELINE_FIELD_NAMES]

    def proposed(self) -> List[str]:
        return [name for name in GUIDELINE_FIELD_NAMES if getattr(self, name) is not None]

    def is_complete(self) -> bool:
        return len(self.proposed()) == len(GUIDELINE_FIELD_NAMES)

    def merged_over(self, guideline: TakingGuideline) -> List[str]:
        """Overlay the proposed values on an existing guideline's boundary form."""
        current = guideline.to_fields()
        return [
            proposed or existing
            for proposed, existing in zip(self.to_fields(), current)
        ]


class Suggestion(BaseModel):
    """One AI-proposed change to the prescription, pending doctor review."""
    model_config = ConfigDict(frozen=True)

    action: SuggestionAction
    product_id: ProductID
    guideline_fields: Optional[GuidelineFields] = None

    @model_validator(mode="after")
    def _fields_match_action(self) -> "Suggestion":
        if self.action is SuggestionAction.ELIMINATE:
            if self.guideline_fields is not None:
                raise ValueError("ELIMINATE suggestions carry no guideline fields")
        elif self.guideline_fields is None:
            raise ValueError(f"{self.action.value} suggestions require guideline fields")
        elif self.action is SuggestionAction.INSERT and not self.guideline_fields.is_complete():
            raise ValueError("INSERT suggestions require every guideline field")
        elif self.action is SuggestionAction.MODIFY and not self.guideline_fields.proposed():
            raise ValueError("MODIFY suggestions must change at least one field")
        return self

    def __str__(self) -> str:
        fields = "none"
        if self.guideline_fields is not None:
            fields = ",".join(self.guideline_fields.to_fields())
        return f"<{self.action.value}, {self.product_id.code}, {fields}>"


__all__ = ["SuggestionAction", "GuidelineFields", "Suggestion"]
