from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEALTH_CARD_ID_PATTERN = r"^[A-Za-z0-9]{16}$"
PRODUCT_CODE_PATTERN = r"^[A-Za-z0-9]{12,16}$"
PRESCRIPTION_CODE_PATTERN = r"^[A-Za-z0-9]{16}$"


class HealthCardID(BaseModel):
    """Personal identifying code of a patient in the national health service."""
    model_config = ConfigDict(frozen=True)

    personal_id: str = Field(pattern=HEALTH_CARD_ID_PATTERN)

    def __str__(self) -> str:
        return self.personal_id


class ProductID(BaseModel):
    """Universal product code of a medicine (12 to 16 alphanumerics)."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(pattern=PRODUCT_CODE_PATTERN)

    def __str__(self) -> str:
        return self.code


class PrescriptionCode(BaseModel):
    """Code issued by the registry once a prescription has been accepted."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(pattern=PRESCRIPTION_CODE_PATTERN)

    def __str__(self) -> str:
        return self.code


class DigitalSignature(BaseModel):
    """Opaque signature blob. Mutable buffers are copied into immutable bytes."""
    model_config = ConfigDict(frozen=True, ser_json_bytes="hex", val_json_bytes="hex")

    signature: bytes = Field(min_length=1)

    @field_validator("signature", mode="before")
    @classmethod
    def _copy_buffer(cls, value: object) -> object:
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        return value

    def __repr__(self) -> str:
        return f"DigitalSignature({self.signature.hex()[:16]}...)"


__all__ = [
    "HEALTH_CARD_ID_PATTERN",
    "PRODUCT_CODE_PATTERN",
    "PRESCRIPTION_CODE_PATTERN",
    "HealthCardID",
    "ProductID",
    "PrescriptionCode",
    "DigitalSignature",
]
