# src/model_sync/smoke/base.py
from dataclasses import dataclass


class SmokeFailed(RuntimeError):
    """The artifact could not be loaded into its inference runtime."""


@dataclass
class SmokeResult:
    name: str
    passed: bool
    detail: str = ""
