"""
Interfaces of the two external systems the consultation terminal talks to.

Implementations are injected into ``ConsultationTerminal``; tests substitute
stand-ins for both.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from packages.core.schemas.history import MedicalHistory
from packages.core.schemas.identifiers import HealthCardID
from packages.core.schemas.prescription import MedicalPrescription
from packages.core.schemas.suggestion import Suggestion


class HealthNationalService(ABC):
    """National health registry holding histories and prescriptions."""

    @abstractmethod
    def fetch_history(self, patient_id: HealthCardID) -> MedicalHistory:
        """
        Raises:
            RegistryConnectionError: registry unreachable
            UnknownPatientError:     patient not registered
        """

    @abstractmethod
    def fetch_prescription(self, patient_id: HealthCardID, illness: str) -> MedicalPrescription:
        """
        Raises:
            RegistryConnectionError, UnknownPatientError
            NoActivePrescriptionError: no active prescription for ``illness``
        """

    @abstractmethod
    def submit(
        self,
        patient_id: HealthCardID,
        history: MedicalHistory,
        illness: str,
        prescription: MedicalPrescription,
    ) -> MedicalPrescription:
        """
        Store history and prescription remotely.

        Returns a new prescription instance carrying the issued code.

        Raises:
            RegistryConnectionError, UnknownPatientError, NoActivePrescriptionError
            IncompletePrescriptionError: signature, dates or lines missing
        """


class DecisionMakingAI(ABC):
    """Decision support system proposing treatment adjustments."""

    @abstractmethod
    def initialize(self) -> None:
        """Raises DecisionMakingAIError when the system cannot start."""

    @abstractmethod
    def ask(self, prompt: str) -> str:
        """Raises BadPromptError when the prompt is unclear or inconsistent."""

    @abstractmethod
    def parse(self, response: str) -> List[Suggestion]:
        """Best-effort extraction of suggestions; may return an empty list."""


__all__ = ["HealthNationalService", "DecisionMakingAI"]
