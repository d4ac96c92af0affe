from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, Field

DEFAULT_ENV_PATH = ".env"
DEFAULT_SIGNING_KEY = "unsigned-development-key"


def load_dotenv(path: str | Path = DEFAULT_ENV_PATH) -> dict[str, str]:
    """Export variables from a dotenv file without overriding the environment.

    Returns the variables that were actually exported.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return {}

    loaded: dict[str, str] = {}
    for key, value in dotenv_values(env_path).items():
        if value is None or key in os.environ:
            continue
        os.environ[key] = value
        loaded[key] = value
    return loaded


class Settings(BaseModel):
    ai_mode: Literal["mock", "llm"] = "mock"
    signing_key: str = Field(default=DEFAULT_SIGNING_KEY, min_length=1)
    log_level: str = "WARNING"
    doctor_membership_number: int = Field(default=0, ge=0)


def load_settings(env_path: Optional[str | Path] = None) -> Settings:
    load_dotenv(env_path or DEFAULT_ENV_PATH)
    values: dict[str, object] = {}
    if os.getenv("CONSULTATION_AI_MODE"):
        values["ai_mode"] = os.environ["CONSULTATION_AI_MODE"].strip().lower()
    if os.getenv("CONSULTATION_SIGNING_KEY"):
        values["signing_key"] = os.environ["CONSULTATION_SIGNING_KEY"]
    if os.getenv("CONSULTATION_LOG_LEVEL"):
        values["log_level"] = os.environ["CONSULTATION_LOG_LEVEL"].strip().upper()
    if os.getenv("CONSULTATION_DOCTOR_ID"):
        values["doctor_membership_number"] = os.environ["CONSULTATION_DOCTOR_ID"]
    return Settings(**values)


__all__ = ["DEFAULT_SIGNING_KEY", "Settings", "load_dotenv", "load_settings"]
