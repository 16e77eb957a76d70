"""
RTL Fix Service - HTTP front end for the fixer

Run with:
    uvicorn main:app --port 8000

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from diagnostics import run_diagnostics
from models import (
    BatchFixRequest,
    BatchFixResponse,
    CacheStatsResponse,
    FixRequest,
    FixResponse,
    HealthResponse,
)
from rtl_processor import RTLProcessor, get_processor
from text_cache import processing_signature

logger = logging.getLogger("rtl_fix.main")
if not logging.getLogger().hasHandlers():
    logging.basicConfig(level=logging.INFO)

app = FastAPI(title="RTL Text Fixer")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _processor_for(options: dict) -> RTLProcessor:
    """Shared processor, or a view of it with overridden settings."""
    processor = get_processor()
    if not options:
        return processor

    try:
        config = processor.config.with_options(**options)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid options: {e}")

    # Same cache: keys carry the settings signature
    return RTLProcessor(config=config, cache=processor.cache, monitor=processor.monitor)


@app.post("/fix", response_model=FixResponse)
def fix_text(request: FixRequest):
    processor = _processor_for(request.options)
    result = processor.fix(request.text, request.use_ligatures)

    logger.debug(
        "Fix request: len=%s, ligatures=%s, options=%s",
        len(request.text or ""),
        request.use_ligatures,
        sorted(request.options),
    )

    return FixResponse(
        text=result,
        changed=result != request.text,
        signature=f"{processing_signature(processor.config, request.use_ligatures):08X}",
    )


@app.post("/fix/batch", response_model=BatchFixResponse)
def fix_batch(request: BatchFixRequest):
    processor = get_processor()
    return BatchFixResponse(
        texts=[processor.fix(text, request.use_ligatures) for text in request.texts]
    )


@app.get("/cache/stats", response_model=CacheStatsResponse)
def cache_stats():
    cache = get_processor().cache
    stats = cache.stats()
    return CacheStatsResponse(
        entries=stats.entries,
        max_size=cache.max_size,
        hits=stats.hits,
        misses=stats.misses,
        evictions=stats.evictions,
        trims=stats.trims,
        hit_rate=stats.hit_rate,
    )


@app.delete("/cache")
def clear_cache():
    get_processor().clear_cache()
    logger.info("Cache cleared via API")
    return {"cleared": True}


@app.get("/health", response_model=HealthResponse)
def health():
    result = run_diagnostics(get_processor())
    return HealthResponse(
        status="ok" if result.ok or result.skipped else "degraded",
        diagnostics_passed=result.passed,
        diagnostics_total=result.total,
        diagnostics_skipped=result.skipped,
    )
