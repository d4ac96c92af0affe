from __future__ import annotations

import hashlib
import hmac
import json

from packages.core.config import DEFAULT_SIGNING_KEY
from packages.core.schemas.identifiers import DigitalSignature
from packages.core.schemas.prescription import MedicalPrescription


def _canonical_payload(prescription: MedicalPrescription) -> bytes:
    payload = {
        "patient_id": prescription.patient_id.personal_id,
        "membership_number": prescription.membership_number,
        "illness": prescription.illness,
        "prescription_date": (
            prescription.prescription_date.isoformat() if prescription.prescription_date else None
        ),
        "end_date": prescription.end_date.isoformat() if prescription.end_date else None,
        "lines": {
            code: line.guideline.to_fields() for code, line in sorted(prescription.lines.items())
        },
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


class PlaceholderSigner:
    """HMAC-SHA256 stand-in until the doctor's signing certificate is wired in."""

    def __init__(self, key: str = DEFAULT_SIGNING_KEY) -> None:
        if not key:
            raise ValueError("signing key cannot be empty")
        self._key = key.encode("utf-8")

    def sign(self, prescription: MedicalPrescription) -> DigitalSignature:
        digest = hmac.new(self._key, _canonical_payload(prescription), hashlib.sha256).digest()
        return DigitalSignature(signature=digest)

    def verify(self, prescription: MedicalPrescription, signature: DigitalSignature) -> bool:
        expected = self.sign(prescription).signature
        return hmac.compare_digest(expected, signature.signature)


__all__ = ["PlaceholderSigner"]
