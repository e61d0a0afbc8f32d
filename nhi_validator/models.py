"""
Pydantic models for NHI check results and batch reports.

``NHI`` itself is usable as a pydantic field type: it serialises as its
plain string and re-validates on the way in, so a model holding an ``NHI``
can never carry an invalid number.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .formats import NHIFormat
from .nhi import NHI

# ─── Result Codes ────────────────────────────────────────────────────

CODE_VALID = "NHI_VALID"
CODE_INVALID = "NHI_INVALID"
CODE_RESERVED_FOR_TESTING = "NHI_RESERVED_FOR_TESTING"


# ─── Single Candidate ───────────────────────────────────────────────


class NHICheckResult(BaseModel):
    """Outcome of checking one candidate string."""

    candidate: str  # Exactly as supplied (after whitespace stripping)
    is_valid: bool
    nhi: Optional[NHI] = None  # Normalised value; set whenever the NHI parsed
    format: Optional[NHIFormat] = None
    is_test: Optional[bool] = None
    code: str  # Machine-readable, e.g. "NHI_INVALID"
    message: str  # Human-readable explanation


# ─── Batch Report ───────────────────────────────────────────────────


class ValidationReport(BaseModel):
    """The final output of the batch validation pipeline."""

    total: int
    valid_count: int
    invalid_count: int
    test_count: int  # Parsed NHIs in the Z range, whether accepted or not
    exclude_test_values: bool
    results: list[NHICheckResult] = Field(default_factory=list)
    input_hash: str = ""  # SHA-256 of the submitted candidates for audit trail

    @property
    def all_valid(self) -> bool:
        return self.total > 0 and self.invalid_count == 0
