from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from packages.core.schemas.history import MedicalHistory
from packages.core.schemas.prescription import MedicalPrescription


class ConsultationSession(BaseModel):
    """In-memory state of one consultation. Owned by a single terminal."""

    revision_initialized: bool = False
    edition_initialized: bool = False
    edition_open: bool = False
    ai_initialized: bool = False
    dates_set: bool = False
    signature_stamped: bool = False

    history: Optional[MedicalHistory] = None
    prescription: Optional[MedicalPrescription] = None
    illness: Optional[str] = None
    last_ai_response: Optional[str] = None

    def clear_phases(self) -> None:
        """Drop every flag that belongs to a phase after the revision."""
        self.edition_initialized = False
        self.edition_open = False
        self.ai_initialized = False
        self.last_ai_response = None
        self.dates_set = False
        self.signature_stamped = False

    def drop_signature(self) -> None:
        """Forget a stamp whose signed content is about to change."""
        self.signature_stamped = False
        if self.prescription is not None:
            self.prescription.signature = None

    def phase(self) -> str:
        if not self.revision_initialized:
            return "idle"
        if self.signature_stamped:
            return "signature_stamped"
        if self.dates_set:
            return "dates_set"
        if self.edition_open:
            return "ai_ready" if self.ai_initialized else "edition_active"
        if self.edition_initialized:
            return "edition_finished"
        return "revision_active"


__all__ = ["ConsultationSession"]
