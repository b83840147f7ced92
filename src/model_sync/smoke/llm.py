# src/model_sync/smoke/llm.py
from typing import Optional

import ollama

from ..config import OLLAMA_GENERATE_TIMEOUT, OLLAMA_HOST
from .base import SmokeFailed, SmokeResult

PROMPT = "Reply with exactly: OK"


def check_llm(model: str, client: Optional[ollama.Client] = None) -> SmokeResult:
    client = client or ollama.Client(host=OLLAMA_HOST, timeout=OLLAMA_GENERATE_TIMEOUT)
    try:
        resp = client.generate(model=model, prompt=PROMPT)
    except Exception as e:
        raise SmokeFailed(f"Ollama could not run '{model}' (is the server running at {OLLAMA_HOST}?)") from e

    text = (resp.get("response") or "").strip()
    first_lines = " / ".join(text.splitlines()[:5])
    return SmokeResult(name="llm", passed=bool(text), detail=f"response={first_lines!r}")
