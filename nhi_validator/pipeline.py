"""
Batch validation pipeline — checks many candidates and compiles a report.

Flow:
  candidates ──► strip / skip blanks ──► parse ──► test-range policy ──► report

  - Each candidate is checked independently; one bad value never stops the batch.
  - Rejections are logged at DEBUG only; NHIs are health identifiers.
  - The submitted candidates are SHA-256 hashed for an audit trail.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable

from .config import Settings
from .exceptions import BatchTooLargeError, NHIParseError
from .models import (
    CODE_INVALID,
    CODE_RESERVED_FOR_TESTING,
    CODE_VALID,
    NHICheckResult,
    ValidationReport,
)
from .nhi import NHI

logger = logging.getLogger(__name__)


class NHIValidationPipeline:
    """Validates batches of candidate NHI strings.

    Usage:
        pipeline = NHIValidationPipeline()
        report = pipeline.run(["ZAC5361", "zbn77vl", "ZZZ0044"])
        for result in report.results:
            print(result.candidate, result.code)
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()

    def check(self, candidate: str) -> NHICheckResult:
        """Check a single candidate against the validation routine and policy."""
        try:
            nhi = NHI.parse(candidate)
        except NHIParseError as e:
            logger.debug("Rejected candidate: %s", e)
            return NHICheckResult(
                candidate=candidate,
                is_valid=False,
                code=CODE_INVALID,
                message="Not a valid NHI number under either the old or new format.",
            )

        if nhi.is_test() and self.settings.exclude_test_values:
            return NHICheckResult(
                candidate=candidate,
                is_valid=False,
                nhi=nhi,
                format=nhi.format,
                is_test=True,
                code=CODE_RESERVED_FOR_TESTING,
                message=f"{nhi} is reserved for testing and test values are excluded.",
            )

        return NHICheckResult(
            candidate=candidate,
            is_valid=True,
            nhi=nhi,
            format=nhi.format,
            is_test=nhi.is_test(),
            code=CODE_VALID,
            message=f"{nhi} is a valid {nhi.format.value.lower()}-format NHI number.",
        )

    def run(self, candidates: Iterable[str]) -> ValidationReport:
        """Check every non-blank candidate and compile a report.

        Raises:
            BatchTooLargeError: if the batch exceeds ``settings.max_batch_size``.
        """
        cleaned = [c.strip() for c in candidates if c.strip()]
        if len(cleaned) > self.settings.max_batch_size:
            raise BatchTooLargeError(
                f"Batch of {len(cleaned)} exceeds the maximum of "
                f"{self.settings.max_batch_size} candidates",
                {"size": len(cleaned), "max_batch_size": self.settings.max_batch_size},
            )

        input_hash = hashlib.sha256("\n".join(cleaned).encode("utf-8")).hexdigest()
        logger.info("Validating batch of %d candidate(s)", len(cleaned))

        results = [self.check(candidate) for candidate in cleaned]
        valid_count = sum(1 for r in results if r.is_valid)
        test_count = sum(1 for r in results if r.is_test)

        logger.info(
            "Batch complete: %d valid, %d invalid, %d reserved for testing",
            valid_count,
            len(results) - valid_count,
            test_count,
        )

        return ValidationReport(
            total=len(results),
            valid_count=valid_count,
            invalid_count=len(results) - valid_count,
            test_count=test_count,
            exclude_test_values=self.settings.exclude_test_values,
            results=results,
            input_hash=input_hash,
        )
