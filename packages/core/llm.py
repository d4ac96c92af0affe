from __future__ import annotations

import json
import os
import random
import time
import urllib.error
import urllib.request
from typing import Optional

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_SYSTEM_PROMPT = "You are a careful clinical decision support assistant."
RETRYABLE_STATUS = {429, 503}


def _read_http_error_body(error: urllib.error.HTTPError) -> str:
    try:
        body_bytes = error.read()
    except Exception:
        return ""
    return body_bytes.decode("utf-8", errors="replace") if body_bytes else ""


def _retry_after(error: urllib.error.HTTPError) -> Optional[float]:
    if not error.headers:
        return None
    value = error.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class LLMClient:
    """Minimal chat-completions client. Failures surface as RuntimeError."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        *,
        timeout: float = 30,
        max_retries: int = 5,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.base_url = os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL).rstrip("/")
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
        self.timeout = timeout
        self.max_retries = max_retries

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _request(self, system_prompt: str, prompt: str) -> urllib.request.Request:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0,
        }
        return urllib.request.Request(
            f"{self.base_url}/chat/completions",
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            method="POST",
        )

    def complete(self, prompt: str, system_prompt: str = DEFAULT_SYSTEM_PROMPT) -> str:
        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")

        request = self._request(system_prompt, prompt)
        url = request.full_url
        for attempt in range(self.max_retries + 1):
            try:
                with urllib.request.urlopen(request, timeout=self.timeout) as response:
                    status = response.getcode()
                    raw = response.read()
                text = raw.decode("utf-8", errors="replace")
                try:
                    body = json.loads(text)
                    return body["choices"][0]["message"]["content"]
                except (ValueError, KeyError, IndexError, TypeError) as exc:
                    raise RuntimeError(
                        "LLM returned an unexpected payload: "
                        f"status={status} url={url} body_preview={text[:500]}"
                    ) from exc
            except urllib.error.HTTPError as exc:
                status = getattr(exc, "code", "unknown")
                if status in RETRYABLE_STATUS and attempt < self.max_retries:
                    delay = _retry_after(exc)
                    if delay is None:
                        delay = 2**attempt
                    time.sleep(delay + random.random() * 0.25)
                    continue
                content_type = exc.headers.get("Content-Type", "unknown") if exc.headers else "unknown"
                preview = _read_http_error_body(exc).strip()[:500]
                raise RuntimeError(
                    "LLM HTTPError: "
                    f"status={status} content_type={content_type} url={url} "
                    f"body_preview={preview}"
                ) from exc
            except RuntimeError:
                raise
            except Exception as exc:
                raise RuntimeError(
                    f"LLM request failed: url={url} error={type(exc).__name__}: {exc}"
                ) from exc

        raise RuntimeError("LLM request failed after retries")


__all__ = ["LLMClient", "DEFAULT_SYSTEM_PROMPT"]
