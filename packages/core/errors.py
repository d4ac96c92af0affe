"""
Exception hierarchy for the consultation workflow.

Every error carries a stable ``code`` (used by the CLI error payload), a
human readable message and an optional ``detail`` dict.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ConsultationError(Exception):
    """Base class for every error raised by the consultation core."""

    code = "consultation_error"

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)

    def to_payload(self) -> dict:
        return {"error": {"code": self.code, "message": self.message, "detail": self.detail}}


# validation


class IncorrectParametersError(ConsultationError, ValueError):
    code = "invalid_parameters"


class InvalidIdentifierError(IncorrectParametersError):
    """A patient, product or prescription identifier failed its format check."""

    code = "invalid_identifier"


# precondition


class ProceduralError(ConsultationError):
    """An operation was invoked outside the session phase it requires."""

    code = "procedural_error"


# domain


class ProductAlreadyInPrescriptionError(ConsultationError):
    code = "product_already_in_prescription"


class ProductNotInPrescriptionError(ConsultationError):
    code = "product_not_in_prescription"


class IncorrectTakingGuidelinesError(ConsultationError):
    code = "incorrect_taking_guidelines"


class IncorrectEndingDateError(ConsultationError):
    code = "incorrect_ending_date"


# collaborators


class RegistryConnectionError(ConsultationError, ConnectionError):
    code = "registry_unreachable"


class UnknownPatientError(ConsultationError):
    code = "unknown_patient"


class NoActivePrescriptionError(ConsultationError):
    code = "no_active_prescription"


class IncompletePrescriptionError(ConsultationError):
    code = "incomplete_prescription"


class DecisionMakingAIError(ConsultationError):
    code = "ai_system_error"


class BadPromptError(ConsultationError):
    code = "bad_prompt"


# signature


class SignatureError(ConsultationError):
    code = "signature_error"


__all__ = [
    "ConsultationError",
    "IncorrectParametersError",
    "InvalidIdentifierError",
    "ProceduralError",
    "ProductAlreadyInPrescriptionError",
    "ProductNotInPrescriptionError",
    "IncorrectTakingGuidelinesError",
    "IncorrectEndingDateError",
    "RegistryConnectionError",
    "UnknownPatientError",
    "NoActivePrescriptionError",
    "IncompletePrescriptionError",
    "DecisionMakingAIError",
    "BadPromptError",
    "SignatureError",
]
