"""
NHI Validator — FastAPI Server
==============================

RESTful API for checking New Zealand NHI numbers.

Endpoints:
    POST /validate          Check a single candidate NHI
    POST /validate/batch    Check a list of candidates
    POST /validate/file     Upload a text file, one candidate per line
    GET  /nhi/{value}       Parse and normalise one NHI (404 if invalid)
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
    http://localhost:8000/redoc            # ReDoc (alternative)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, UploadFile
from pydantic import BaseModel, Field

from nhi_validator import NHI, NHIFormat, NHIParseError, __version__
from nhi_validator.config import configure_logging, load_settings
from nhi_validator.exceptions import BatchTooLargeError
from nhi_validator.models import NHICheckResult, ValidationReport
from nhi_validator.pipeline import NHIValidationPipeline

logger = logging.getLogger(__name__)

_MAX_UPLOAD_BYTES = 1_048_576


# ─── Application Lifespan ────────────────────────────────────────────

_pipeline: NHIValidationPipeline | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Read settings (.env included) and build the pipeline on startup."""
    global _pipeline  # noqa: PLW0603
    settings = load_settings()
    configure_logging(settings)
    _pipeline = NHIValidationPipeline(settings)
    logger.info("NHI validator ready (exclude_test_values=%s)", settings.exclude_test_values)
    yield
    _pipeline = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="NHI Validator API",
    description=(
        "Checks New Zealand National Health Index numbers against the "
        "HISO 10046:2023 validation routine (old AAANNNN and new AAANNAA "
        "formats). Does not check that an NHI has been assigned."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class ValidateRequest(BaseModel):
    """Request body for the /validate endpoint."""

    nhi: str = Field(
        ...,
        max_length=64,
        description="Candidate NHI number (case-insensitive).",
        json_schema_extra={"example": "ZBN77VL"},
    )


class BatchValidateRequest(BaseModel):
    """Request body for the /validate/batch endpoint."""

    nhis: list[str] = Field(
        ...,
        min_length=1,
        description="Candidate NHI numbers.",
        json_schema_extra={"example": ["ZAC5361", "zbn77vl", "ZZZ0044"]},
    )


class BatchValidateResponse(BaseModel):
    """Batch report returned by the API."""

    total: int
    valid_count: int
    invalid_count: int
    test_count: int
    all_valid: bool
    exclude_test_values: bool
    input_hash: str = Field(description="SHA-256 hash of the submitted candidates")
    results: list[NHICheckResult]


class NHIResponse(BaseModel):
    nhi: NHI
    format: NHIFormat
    is_test: bool


class HealthResponse(BaseModel):
    status: str
    version: str
    exclude_test_values: bool


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_pipeline() -> NHIValidationPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return _pipeline


def _run_batch(pipeline: NHIValidationPipeline, candidates: list[str]) -> ValidationReport:
    try:
        return pipeline.run(candidates)
    except BatchTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e)) from e


def _build_response(report: ValidationReport) -> BatchValidateResponse:
    """Convert the internal ValidationReport to the API response schema."""
    return BatchValidateResponse(
        total=report.total,
        valid_count=report.valid_count,
        invalid_count=report.invalid_count,
        test_count=report.test_count,
        all_valid=report.all_valid,
        exclude_test_values=report.exclude_test_values,
        input_hash=report.input_hash,
        results=report.results,
    )


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/validate",
    summary="Check a single NHI number",
    tags=["Validation"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def validate_nhi(request: ValidateRequest) -> NHICheckResult:
    """Check one candidate. Invalid candidates are a normal 200 response with
    `is_valid: false`; the reason is never more specific than `NHI_INVALID`.
    """
    pipeline = _get_pipeline()
    return pipeline.check(request.nhi.strip())


@app.post(
    "/validate/batch",
    summary="Check a list of NHI numbers",
    tags=["Validation"],
    responses={
        413: {"description": "Batch larger than NHI_MAX_BATCH_SIZE"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
async def validate_batch(request: BatchValidateRequest) -> BatchValidateResponse:
    """Check every candidate and return per-candidate results plus counts."""
    pipeline = _get_pipeline()
    report = await asyncio.to_thread(_run_batch, pipeline, request.nhis)
    return _build_response(report)


@app.post(
    "/validate/file",
    summary="Check NHI numbers from an uploaded text file",
    tags=["Validation"],
    responses={
        413: {"description": "File too large (max 1 MB) or too many lines"},
        400: {"description": "File is not valid UTF-8 text"},
        422: {"description": "File contains no candidates"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
async def validate_file(file: UploadFile) -> BatchValidateResponse:
    """Upload a `.txt` file with one candidate NHI per line (max 1 MB)."""
    if file.size and file.size > _MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large (max 1 MB)")

    content = await file.read()
    try:
        raw_text = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text")

    lines = raw_text.splitlines()
    if not any(line.strip() for line in lines):
        raise HTTPException(status_code=422, detail="File contains no NHI candidates")

    pipeline = _get_pipeline()
    report = await asyncio.to_thread(_run_batch, pipeline, lines)
    return _build_response(report)


@app.get(
    "/nhi/{value}",
    summary="Parse and normalise an NHI number",
    tags=["Validation"],
    responses={404: {"description": "Not a valid NHI number"}},
)
def get_nhi(value: str) -> NHIResponse:
    """Return the normalised NHI. Test-range NHIs are returned regardless of
    `NHI_EXCLUDE_TEST_VALUES`; `is_test` tells the caller which range it is in.
    """
    try:
        nhi = NHI.parse(value)
    except NHIParseError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return NHIResponse(nhi=nhi, format=nhi.format, is_test=nhi.is_test())


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and configuration info."""
    pipeline = _get_pipeline()
    return HealthResponse(
        status="healthy",
        version=__version__,
        exclude_test_values=pipeline.settings.exclude_test_values,
    )
