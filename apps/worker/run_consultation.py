from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from packages.advisors.factory import get_decision_ai
from packages.consultation.signature import PlaceholderSigner
from packages.consultation.terminal import ConsultationTerminal
from packages.core.config import Settings, load_settings
from packages.core.errors import BadPromptError, ConsultationError, InvalidIdentifierError
from packages.core.schemas.identifiers import HealthCardID, ProductID
from packages.registry.in_memory import InMemoryHealthNationalService


class ScriptLine(BaseModel):
    product_id: str
    guideline: list[str]


class ConsultationScript(BaseModel):
    patient_id: str
    membership_number: Optional[int] = Field(default=None, ge=0)
    illness: str
    assessment: Optional[str] = None
    ai_prompt: Optional[str] = None
    lines: list[ScriptLine] = Field(default_factory=list)
    ending_in_days: float = Field(default=30, gt=0)


def _load_script(path: Path) -> ConsultationScript:
    with path.open("r", encoding="utf-8") as handle:
        return ConsultationScript.model_validate(json.load(handle))


def _identifier(model: type[BaseModel], **values: str) -> BaseModel:
    try:
        return model(**values)
    except ValidationError as exc:
        raise InvalidIdentifierError(
            f"invalid {model.__name__}",
            detail={"errors": [error["msg"] for error in exc.errors()], **values},
        ) from exc


def _error(exc: ConsultationError) -> int:
    print(json.dumps(exc.to_payload()), file=sys.stderr)
    return 1


def run_script(script: ConsultationScript, mode: str, settings: Settings) -> dict:
    patient_id = _identifier(HealthCardID, personal_id=script.patient_id)
    registry = InMemoryHealthNationalService()
    membership_number = script.membership_number
    if membership_number is None:
        membership_number = settings.doctor_membership_number
    registry.register_patient(patient_id, membership_number, illnesses=[script.illness])

    terminal = ConsultationTerminal(
        registry,
        get_decision_ai(mode),
        signer=PlaceholderSigner(settings.signing_key),
    )
    terminal.start_revision(patient_id, script.illness)
    if script.assessment:
        terminal.record_assessment(script.assessment)
    terminal.begin_edition()

    suggestions = []
    if script.ai_prompt:
        terminal.consult_ai()
        try:
            terminal.ask_ai(script.ai_prompt)
        except BadPromptError as exc:
            print(f"AI rejected prompt: {exc}", file=sys.stderr)
        else:
            suggestions = [str(item) for item in terminal.extract_suggestions()]

    for line in script.lines:
        terminal.add_line(_identifier(ProductID, code=line.product_id), line.guideline)
    terminal.set_ending_date(datetime.now() + timedelta(days=script.ending_in_days))
    terminal.finish_edition()
    terminal.stamp_signature()
    prescription = terminal.transmit()

    return {
        "prescription": json.loads(prescription.model_dump_json()),
        "history": terminal.history.history,
        "suggestions": suggestions,
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay a scripted consultation session.")
    parser.add_argument("script", type=Path, help="Path to the consultation script JSON.")
    parser.add_argument("--mode", choices=["mock", "llm"], help="Decision making AI backend.")
    parser.add_argument("--env", type=Path, help="Path to a dotenv file.")
    args = parser.parse_args()

    settings = load_settings(args.env)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    if not args.script.is_file():
        print(f"Error: script not found: {args.script}", file=sys.stderr)
        return 2
    try:
        script = _load_script(args.script)
    except ValueError as exc:
        print(f"Error: invalid consultation script: {exc}", file=sys.stderr)
        return 2

    try:
        result = run_script(script, args.mode or settings.ai_mode, settings)
    except ConsultationError as exc:
        return _error(exc)

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
