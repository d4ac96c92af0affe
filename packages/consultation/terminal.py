"""Consultation terminal: the doctor's "supervise treatment" session.

Operation order enforced by the terminal:

    start_revision -> record_assessment* -> begin_edition
        -> [consult_ai -> ask_ai -> extract_suggestions]
        -> add_line / modify_dose / remove_line
        -> set_ending_date -> finish_edition -> stamp_signature -> transmit

Every operation validates its input and checks its preconditions before
touching the session, so a failed call leaves the session exactly as it was.
Editing lines or dates, or reopening the edition, drops any stamped signature;
it has to be stamped again before transmit.
The terminal is not thread-safe; use one instance per consultation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from packages.consultation.services import DecisionMakingAI, HealthNationalService
from packages.consultation.session import ConsultationSession
from packages.consultation.signature import PlaceholderSigner
from packages.core.errors import (
    IncorrectEndingDateError,
    IncorrectParametersError,
    ProceduralError,
    SignatureError,
)
from packages.core.schemas.history import MedicalHistory
from packages.core.schemas.identifiers import HealthCardID, ProductID
from packages.core.schemas.prescription import MedicalPrescription
from packages.core.schemas.suggestion import Suggestion

logger = logging.getLogger(__name__)

MIN_TREATMENT_SPAN = timedelta(days=1)


def _span(start: datetime, end: datetime) -> timedelta:
    if (start.tzinfo is None) != (end.tzinfo is None):
        # mixed naive/aware: read the naive one as local time
        start, end = start.astimezone(), end.astimezone()
    return end - start


def _require_text(value: object, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise IncorrectParametersError(f"{label} cannot be null or empty")
    return value


def _require_product(product_id: object) -> ProductID:
    if not isinstance(product_id, ProductID):
        raise IncorrectParametersError("product id is required")
    return product_id


class ConsultationTerminal:
    def __init__(
        self,
        health_service: HealthNationalService,
        decision_ai: DecisionMakingAI,
        *,
        signer: Optional[PlaceholderSigner] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.health_service = health_service
        self.decision_ai = decision_ai
        self.signer = signer or PlaceholderSigner()
        self._clock = clock or datetime.now
        self.session = ConsultationSession()

    # -- read access -------------------------------------------------------

    @property
    def history(self) -> Optional[MedicalHistory]:
        return self.session.history

    @property
    def prescription(self) -> Optional[MedicalPrescription]:
        return self.session.prescription

    @property
    def illness(self) -> Optional[str]:
        return self.session.illness

    @property
    def last_ai_response(self) -> Optional[str]:
        return self.session.last_ai_response

    # -- preconditions -----------------------------------------------------

    def _require_revision(self, action: str) -> None:
        if not self.session.revision_initialized:
            raise ProceduralError(
                f"Cannot {action}: revision not initialized",
                detail={"phase": self.session.phase()},
            )

    def _require_open_edition(self, action: str) -> None:
        if not self.session.edition_open:
            raise ProceduralError(
                f"Cannot {action}: prescription edition not active",
                detail={"phase": self.session.phase()},
            )

    def _require_ai(self, action: str) -> None:
        self._require_open_edition(action)
        if not self.session.ai_initialized:
            raise ProceduralError(
                f"Cannot {action}: decision making AI not initialized",
                detail={"phase": self.session.phase()},
            )

    def _require_dated_edition(self, action: str) -> None:
        if not self.session.edition_initialized:
            raise ProceduralError(
                f"Cannot {action}: prescription edition not initialized",
                detail={"phase": self.session.phase()},
            )
        if not self.session.dates_set:
            raise ProceduralError(
                f"Cannot {action}: treatment ending date not set",
                detail={"phase": self.session.phase()},
            )

    # -- revision ----------------------------------------------------------

    def start_revision(self, patient_id: HealthCardID, illness: str) -> None:
        if not isinstance(patient_id, HealthCardID):
            raise IncorrectParametersError("patient id is required")
        _require_text(illness, "illness")

        history = self.health_service.fetch_history(patient_id)
        prescription = self.health_service.fetch_prescription(patient_id, illness)

        session = self.session
        session.history = history
        session.prescription = prescription
        session.illness = illness
        session.revision_initialized = True
        session.clear_phases()
        logger.info("revision started for patient=%s illness=%s", patient_id, illness)

    def record_assessment(self, assessment: str) -> None:
        self._require_revision("enter assessment")
        _require_text(assessment, "assessment")
        self.session.history.add_annotations(assessment)

    def begin_edition(self) -> None:
        self._require_revision("init prescription edition")
        self.session.drop_signature()
        self.session.edition_initialized = True
        self.session.edition_open = True
        logger.info("prescription edition opened for illness=%s", self.session.illness)

    # -- decision support --------------------------------------------------

    def consult_ai(self) -> None:
        self._require_open_edition("call decision making AI")
        self.decision_ai.initialize()
        self.session.ai_initialized = True

    def ask_ai(self, prompt: str) -> str:
        self._require_ai("ask AI")
        _require_text(prompt, "prompt")
        response = self.decision_ai.ask(prompt)
        self.session.last_ai_response = response
        logger.debug("AI answered %d characters", len(response or ""))
        return response

    def extract_suggestions(self) -> List[Suggestion]:
        """Parse the last AI answer. Suggestions are returned for review, never applied."""
        self._require_ai("extract suggestions")
        if self.session.last_ai_response is None:
            raise ProceduralError("Cannot extract suggestions: no AI response yet")
        return list(self.decision_ai.parse(self.session.last_ai_response))

    # -- prescription lines ------------------------------------------------

    def add_line(self, product_id: ProductID, raw_guideline: Optional[Sequence[str]]) -> None:
        self._require_open_edition("add prescription line")
        product_id = _require_product(product_id)
        self.session.prescription.add_line(product_id, raw_guideline)
        self.session.drop_signature()
        logger.info("line added product=%s", product_id)

    def modify_dose(self, product_id: ProductID, new_dose: float) -> None:
        self._require_open_edition("modify dose")
        product_id = _require_product(product_id)
        self.session.prescription.modify_dose(product_id, new_dose)
        self.session.drop_signature()

    def remove_line(self, product_id: ProductID) -> None:
        self._require_open_edition("remove prescription line")
        product_id = _require_product(product_id)
        self.session.prescription.remove_line(product_id)
        self.session.drop_signature()
        logger.info("line removed product=%s", product_id)

    # -- closing the prescription ------------------------------------------

    def set_ending_date(self, ending_date: datetime) -> None:
        self._require_open_edition("set ending date")
        if not isinstance(ending_date, datetime):
            raise IncorrectParametersError("ending date is required")

        now = self._clock()
        gap = _span(now, ending_date)
        if gap <= timedelta(0):
            raise IncorrectEndingDateError(
                "ending date must be in the future",
                detail={"ending_date": ending_date.isoformat(), "now": now.isoformat()},
            )
        if gap < MIN_TREATMENT_SPAN:
            raise IncorrectEndingDateError(
                "treatment must last at least one day",
                detail={"ending_date": ending_date.isoformat(), "now": now.isoformat()},
            )

        prescription = self.session.prescription
        prescription.prescription_date = now
        prescription.end_date = ending_date
        self.session.dates_set = True
        self.session.drop_signature()

    def finish_edition(self) -> None:
        self._require_open_edition("finish prescription edition")
        self.session.edition_open = False

    def stamp_signature(self) -> None:
        try:
            self._require_dated_edition("stamp signature")
        except ProceduralError as exc:
            raise SignatureError(exc.message, detail=exc.detail) from exc

        try:
            signature = self.signer.sign(self.session.prescription)
        except Exception as exc:
            raise SignatureError(f"Error stamping electronic signature: {exc}") from exc

        self.session.prescription.signature = signature
        self.session.signature_stamped = True

    def transmit(self) -> MedicalPrescription:
        self._require_dated_edition("transmit prescription")
        if not self.session.signature_stamped:
            raise ProceduralError(
                "Cannot transmit prescription: signature not stamped",
                detail={"phase": self.session.phase()},
            )

        session = self.session
        patient_id = session.prescription.patient_id
        issued = self.health_service.submit(
            patient_id, session.history, session.illness, session.prescription
        )
        session.prescription = issued
        session.clear_phases()
        logger.info("prescription transmitted patient=%s code=%s", patient_id, issued.issued_code)
        return issued


__all__ = ["ConsultationTerminal", "MIN_TREATMENT_SPAN"]
