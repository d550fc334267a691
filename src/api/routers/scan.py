"""Scan endpoint — fetch metrics, score, cache, wrap in a response envelope."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from src.api.dependencies import enforce_scan_rate_limit, get_cache, get_provider
from src.db.cache import ResultCache
from src.models.token import AnalysisResult
from src.parsers.address import is_valid_mint_length
from src.parsers.exceptions import ProviderError
from src.parsers.providers import MetricsProvider
from src.scoring.analyzer import analyze

router = APIRouter(prefix="/api", tags=["scan"])

MSG_INVALID_BODY = "Missing or invalid mint address"
MSG_INVALID_FORMAT = "Invalid mint address format"
MSG_FETCH_FAILED = (
    "Failed to fetch token data. The token may not exist or the provider is unavailable."
)
MSG_ANALYZE_FAILED = "Failed to analyze token. Please try again."
MSG_INTERNAL = "Internal server error"
MSG_METHOD_NOT_ALLOWED = 'Method not allowed. Use POST with { "mintAddress": "token_address_here" }'


class ScanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mint_address: StrictStr = Field(alias="mintAddress", min_length=1)


class ScanResponse(BaseModel):
    success: bool
    data: AnalysisResult | None = None
    error: str | None = None
    cached: bool | None = None


def envelope(status_code: int = status.HTTP_200_OK, **fields) -> JSONResponse:
    """Serialize a ScanResponse; absent fields are omitted from the JSON."""
    body = ScanResponse(**fields).model_dump(by_alias=True, exclude_none=True, mode="json")
    return JSONResponse(content=body, status_code=status_code)


@router.post("/scan", dependencies=[Depends(enforce_scan_rate_limit)])
async def scan_token(
    request: Request,
    provider: MetricsProvider = Depends(get_provider),
    cache: ResultCache = Depends(get_cache),
) -> JSONResponse:
    """Scan one mint address and return the analysis envelope."""
    try:
        return await _scan(request, provider, cache)
    except Exception:
        logger.exception("[SCAN] Unexpected error in scan route")
        return envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, success=False, error=MSG_INTERNAL
        )


@router.get("/scan")
async def scan_method_not_allowed() -> JSONResponse:
    return envelope(
        status.HTTP_405_METHOD_NOT_ALLOWED, success=False, error=MSG_METHOD_NOT_ALLOWED
    )


async def _scan(
    request: Request, provider: MetricsProvider, cache: ResultCache
) -> JSONResponse:
    try:
        scan_request = ScanRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return envelope(status.HTTP_400_BAD_REQUEST, success=False, error=MSG_INVALID_BODY)

    mint_address = scan_request.mint_address
    if not is_valid_mint_length(mint_address):
        return envelope(status.HTTP_400_BAD_REQUEST, success=False, error=MSG_INVALID_FORMAT)

    cached = await cache.get(mint_address)
    if cached is not None:
        logger.debug(f"[SCAN] Cache hit {mint_address[:12]}")
        return envelope(success=True, data=cached, cached=True)

    try:
        metrics = await provider.fetch_metrics(mint_address)
    except ProviderError as e:
        logger.error(f"[SCAN] {provider.name} failed for {mint_address[:12]}: {e}")
        return envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, success=False, error=MSG_FETCH_FAILED
        )

    try:
        result = analyze(metrics)
    except Exception:
        logger.exception(f"[SCAN] Analysis failed for {mint_address[:12]}")
        return envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, success=False, error=MSG_ANALYZE_FAILED
        )

    await cache.set(mint_address, result)
    logger.info(
        f"[SCAN] {mint_address[:12]} verdict={result.verdict.value} "
        f"score={result.degen_score} confidence={result.confidence} "
        f"missing={len(result.missing_data)}"
    )
    return envelope(success=True, data=result, cached=False)
