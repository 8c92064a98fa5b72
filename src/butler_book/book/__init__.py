from __future__ import annotations

from .publish import resolve_ref, upload_command, upload_destination
from .workflow import STEPS, StepRecord, run_book

__all__ = ["STEPS", "StepRecord", "resolve_ref", "run_book", "upload_command", "upload_destination"]
