from __future__ import annotations

import logging
import secrets
import string
from typing import Dict, Iterable, List, Optional, Tuple

from packages.consultation.services import HealthNationalService
from packages.core.errors import (
    IncompletePrescriptionError,
    NoActivePrescriptionError,
    RegistryConnectionError,
    UnknownPatientError,
)
from packages.core.schemas.history import MedicalHistory
from packages.core.schemas.identifiers import HealthCardID, PrescriptionCode
from packages.core.schemas.prescription import MedicalPrescription

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 16


def generate_prescription_code() -> PrescriptionCode:
    return PrescriptionCode(code="".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH)))


def _missing_parts(prescription: MedicalPrescription) -> List[str]:
    missing = []
    if prescription.signature is None:
        missing.append("signature")
    if prescription.prescription_date is None:
        missing.append("prescription_date")
    if prescription.end_date is None:
        missing.append("end_date")
    if not prescription.lines:
        missing.append("lines")
    return missing


class InMemoryHealthNationalService(HealthNationalService):
    """Registry kept in process memory. Hands out copies, never its own records."""

    def __init__(self) -> None:
        self.online = True
        self._histories: Dict[str, MedicalHistory] = {}
        self._prescriptions: Dict[Tuple[str, str], MedicalPrescription] = {}
        self.submissions: List[Tuple[MedicalHistory, MedicalPrescription]] = []

    def register_patient(
        self,
        patient_id: HealthCardID,
        membership_number: int,
        illnesses: Iterable[str] = (),
        history: str = "",
    ) -> None:
        self._histories[patient_id.personal_id] = MedicalHistory(
            patient_id=patient_id, membership_number=membership_number, history=history
        )
        for illness in illnesses:
            self.open_prescription(patient_id, illness)

    def open_prescription(self, patient_id: HealthCardID, illness: str) -> None:
        history = self._known_history(patient_id)
        self._prescriptions[(patient_id.personal_id, illness)] = MedicalPrescription(
            patient_id=patient_id,
            membership_number=history.membership_number,
            illness=illness,
        )

    def stored_prescription(self, patient_id: HealthCardID, illness: str) -> Optional[MedicalPrescription]:
        stored = self._prescriptions.get((patient_id.personal_id, illness))
        return stored.model_copy(deep=True) if stored is not None else None

    def _check_online(self) -> None:
        if not self.online:
            raise RegistryConnectionError("health national service unreachable")

    def _known_history(self, patient_id: HealthCardID) -> MedicalHistory:
        history = self._histories.get(patient_id.personal_id)
        if history is None:
            raise UnknownPatientError(
                "patient not registered in the health national service",
                detail={"patient_id": patient_id.personal_id},
            )
        return history

    def _active_prescription(self, patient_id: HealthCardID, illness: str) -> MedicalPrescription:
        prescription = self._prescriptions.get((patient_id.personal_id, illness))
        if prescription is None:
            raise NoActivePrescriptionError(
                f"no active prescription for illness: {illness}",
                detail={"patient_id": patient_id.personal_id, "illness": illness},
            )
        return prescription

    def fetch_history(self, patient_id: HealthCardID) -> MedicalHistory:
        self._check_online()
        return self._known_history(patient_id).model_copy(deep=True)

    def fetch_prescription(self, patient_id: HealthCardID, illness: str) -> MedicalPrescription:
        self._check_online()
        self._known_history(patient_id)
        return self._active_prescription(patient_id, illness).model_copy(deep=True)

    def submit(
        self,
        patient_id: HealthCardID,
        history: MedicalHistory,
        illness: str,
        prescription: MedicalPrescription,
    ) -> MedicalPrescription:
        self._check_online()
        self._known_history(patient_id)
        self._active_prescription(patient_id, illness)

        missing = _missing_parts(prescription)
        if missing:
            raise IncompletePrescriptionError(
                f"prescription incomplete, missing: {', '.join(missing)}",
                detail={"missing": missing},
            )

        issued = prescription.model_copy(deep=True)
        issued.issued_code = generate_prescription_code()
        stored_history = history.model_copy(deep=True)
        self._histories[patient_id.personal_id] = stored_history
        self._prescriptions[(patient_id.personal_id, illness)] = issued
        self.submissions.append((stored_history, issued))
        logger.info("prescription registered patient=%s code=%s", patient_id, issued.issued_code)
        return issued.model_copy(deep=True)


__all__ = ["InMemoryHealthNationalService", "generate_prescription_code"]
