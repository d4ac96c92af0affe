from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from packages.core.errors import IncorrectParametersError
from packages.core.schemas.identifiers import HealthCardID


class MedicalHistory(BaseModel):
    """Append-only clinical log of a patient."""
    model_config = ConfigDict(validate_assignment=True)

    patient_id: HealthCardID
    membership_number: int = Field(ge=0)
    history: str = ""

    def add_annotations(self, annotation: str) -> None:
        if not isinstance(annotation, str) or not annotation.strip():
            raise IncorrectParametersError("annotation cannot be empty")
        self.history = f"{self.history}{annotation}\n"

    def set_new_doctor(self, membership_number: int) -> None:
        if isinstance(membership_number, bool) or not isinstance(membership_number, int):
            raise IncorrectParametersError("membership number must be an integer")
        if membership_number < 0:
            raise IncorrectParametersError(
                "membership number cannot be negative",
                detail={"membership_number": membership_number},
            )
        self.membership_number = membership_number


__all__ = ["MedicalHistory"]
