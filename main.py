#!/usr/bin/env python3
"""
NHI Validator — Command-Line Entry Point
=========================================

Checks candidate NHI numbers and prints a colour-coded report.

Usage:
    python main.py ZAC5361 zbn77vl ZZZ0044     # Candidates as arguments
    python main.py --file nhis.txt             # One candidate per line
    cat nhis.txt | python main.py              # Candidates on stdin
    python main.py --exclude-test ZAC5361      # Reject Z-prefixed test NHIs
    python main.py --explain JBX3650           # Show the expected check character

Exit codes:
    0  every candidate is valid
    1  at least one candidate was rejected
    2  no candidates were supplied, the batch was too large, the input file
       could not be read, or an NHI_* setting was invalid
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from nhi_validator.char_codes import char_code
from nhi_validator.checksum import checksum, expected_check_character
from nhi_validator.config import configure_logging, load_settings
from nhi_validator.exceptions import BatchTooLargeError, ConfigurationError
from nhi_validator.formats import NHIFormat, match_format
from nhi_validator.models import CODE_RESERVED_FOR_TESTING, NHICheckResult, ValidationReport
from nhi_validator.nhi import normalise
from nhi_validator.pipeline import NHIValidationPipeline

# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Diagnostics ────────────────────────────────────────────────────


def explain(candidate: str) -> str:
    """Describe why ``candidate`` passed or failed, for humans only.

    The library itself reports a single undifferentiated error; this
    re-derives the detail from the input.
    """
    value = normalise(candidate)
    fmt = match_format(value)
    if fmt is None:
        return "matches neither AAANNNN nor AAANNAA (letters exclude I and O)"

    total = checksum(value)
    expected = expected_check_character(value, fmt)
    if fmt is NHIFormat.OLD:
        if expected is None:
            return f"old format, checksum {total} is divisible by 11: no check digit is valid"
        return f"old format, checksum {total} mod 11 = {total % 11}, expects check digit {expected}"
    return (
        f"new format, checksum {total} mod 23 = {total % 23}, "
        f"expects check letter {expected} (code {char_code(expected)})"
    )


# ─── Pretty Printer ─────────────────────────────────────────────────


def _print_result(result: NHICheckResult, show_explanation: bool) -> None:
    if result.is_valid:
        tag = f"{_GREEN}VALID{_RESET}"
        detail = f"{result.nhi} ({result.format.value.lower()} format"
        detail += ", reserved for testing)" if result.is_test else ")"
    elif result.code == CODE_RESERVED_FOR_TESTING:
        tag = f"{_YELLOW}TEST {_RESET}"
        detail = result.message
    else:
        tag = f"{_RED}INVALID{_RESET}"
        detail = result.message

    print(f"  [{tag}] {_BOLD}{result.candidate}{_RESET}  {_DIM}{detail}{_RESET}")
    if show_explanation:
        print(f"            {_DIM}{explain(result.candidate)}{_RESET}")


def print_report(report: ValidationReport, show_explanation: bool = False) -> int:
    """Pretty-print the batch report with ANSI color codes.

    Returns:
        0 if every candidate passed, 1 otherwise.
    """
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  NHI VALIDATION REPORT{_RESET}")
    print(f"{'=' * _WIDTH}")
    print(f"  Candidates:  {report.total}")
    print(f"  Audit Hash:  {_DIM}{report.input_hash[:16]}...{_RESET}")
    print(f"  Test NHIs:   {'excluded' if report.exclude_test_values else 'allowed'}")
    print(f"{'─' * _WIDTH}")

    for result in report.results:
        _print_result(result, show_explanation)

    print(f"{'=' * _WIDTH}")
    if report.all_valid:
        print(f"  {_GREEN}{_BOLD}ALL {report.total} NHI(S) VALID{_RESET}")
    else:
        print(
            f"  {_RED}{_BOLD}{report.invalid_count} OF {report.total} "
            f"CANDIDATE(S) REJECTED{_RESET}"
        )
    print(f"{'=' * _WIDTH}\n")

    return 0 if report.all_valid else 1


# ─── Main ────────────────────────────────────────────────────────────


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check New Zealand NHI numbers (HISO 10046:2023)."
    )
    parser.add_argument("nhis", nargs="*", help="candidate NHI numbers")
    parser.add_argument("--file", type=Path, help="read candidates from a file, one per line")
    parser.add_argument(
        "--exclude-test",
        action="store_true",
        help="reject NHIs reserved for testing (Z prefix)",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="show the format and expected check character for each candidate",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the batch pipeline over the supplied candidates and print the report."""
    args = _parse_args(argv)
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    if args.exclude_test:
        settings = dataclasses.replace(settings, exclude_test_values=True)
    configure_logging(settings)

    candidates: list[str] = list(args.nhis)
    if args.file is not None:
        try:
            candidates.extend(args.file.read_text(encoding="utf-8").splitlines())
        except (OSError, UnicodeDecodeError) as e:
            print(f"Cannot read {args.file}: {e}", file=sys.stderr)
            return 2
    if not candidates and not sys.stdin.isatty():
        candidates.extend(sys.stdin.read().splitlines())

    if not any(c.strip() for c in candidates):
        print("No NHI candidates supplied.", file=sys.stderr)
        return 2

    pipeline = NHIValidationPipeline(settings)
    try:
        report = pipeline.run(candidates)
    except BatchTooLargeError as e:
        print(str(e), file=sys.stderr)
        return 2
    return print_report(report, show_explanation=args.explain)


if __name__ == "__main__":
    sys.exit(main())
