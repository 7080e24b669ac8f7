"""Outcome of orchestration steps.

A step either succeeds, succeeds with a warning (e.g. the wiki could not
be updated but the changelog file was written) or fails fatally.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    OK = "ok"
    WARNING = "warning"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class StepOutcome:
    """Result of a single orchestration step."""

    step: str
    severity: Severity
    message: str

    @classmethod
    def ok(cls, step: str, message: str) -> StepOutcome:
        return cls(step, Severity.OK, message)

    @classmethod
    def warning(cls, step: str, message: str) -> StepOutcome:
        return cls(step, Severity.WARNING, message)

    @classmethod
    def fatal(cls, step: str, message: str) -> StepOutcome:
        return cls(step, Severity.FATAL, message)

    @property
    def is_fatal(self) -> bool:
        return self.severity is Severity.FATAL
