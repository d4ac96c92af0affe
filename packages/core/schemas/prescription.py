from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.core.errors import (
    IncorrectParametersError,
    ProductAlreadyInPrescriptionError,
    ProductNotInPrescriptionError,
)
from packages.core.guidelines import build_taking_guideline
from packages.core.schemas.dosage import TakingGuideline
from packages.core.schemas.identifiers import (
    DigitalSignature,
    HealthCardID,
    PrescriptionCode,
    ProductID,
)


class PrescriptionLine(BaseModel):
    product_id: ProductID
    guideline: TakingGuideline


def _require_product(product_id: Optional[ProductID]) -> ProductID:
    if not isinstance(product_id, ProductID):
        raise IncorrectParametersError("product id is required")
    return product_id


class MedicalPrescription(BaseModel):
    """A patient's prescription for one illness.

    Lines are keyed by product code; at most one line per product.
    """
    model_config = ConfigDict(validate_assignment=True)

    patient_id: HealthCardID
    membership_number: int = Field(ge=0)
    illness: str
    issued_code: Optional[PrescriptionCode] = None
    prescription_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    signature: Optional[DigitalSignature] = None
    lines: Dict[str, PrescriptionLine] = Field(default_factory=dict)

    @field_validator("illness")
    @classmethod
    def _illness_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("illness cannot be blank")
        return value

    def has_line(self, product_id: ProductID) -> bool:
        return product_id.code in self.lines

    def get_line(self, product_id: ProductID) -> PrescriptionLine:
        product_id = _require_product(product_id)
        line = self.lines.get(product_id.code)
        if line is None:
            raise ProductNotInPrescriptionError(
                f"product {product_id.code} is not in the prescription",
                detail={"product_id": product_id.code},
            )
        return line

    def product_ids(self) -> List[ProductID]:
        return [line.product_id for line in self.lines.values()]

    def add_line(self, product_id: ProductID, raw_guideline: Optional[Sequence[str]]) -> PrescriptionLine:
        product_id = _require_product(product_id)
        if product_id.code in self.lines:
            raise ProductAlreadyInPrescriptionError(
                f"product {product_id.code} is already in the prescription",
                detail={"product_id": product_id.code},
            )
        guideline = build_taking_guideline(raw_guideline)
        line = PrescriptionLine(product_id=product_id, guideline=guideline)
        self.lines[product_id.code] = line
        return line

    def modify_dose(self, product_id: ProductID, new_dose: float) -> None:
        product_id = _require_product(product_id)
        if (
            isinstance(new_dose, bool)
            or not isinstance(new_dose, (int, float))
            or not math.isfinite(new_dose)
            or not new_dose > 0
        ):
            raise IncorrectParametersError(
                "dose must be a positive number", detail={"dose": repr(new_dose)}
            )
        line = self.get_line(product_id)
        line.guideline.posology.dose = float(new_dose)

    def remove_line(self, product_id: ProductID) -> None:
        product_id = _require_product(product_id)
        self.get_line(product_id)
        del self.lines[product_id.code]


__all__ = ["PrescriptionLine", "MedicalPrescription"]
