"""
main.py – FastAPI surface over the PEAR calculation engine.

Start:
    cd /path/to/repo
    uvicorn dashboard_api.main:app --reload --port 8000

Every request recalculates from the entries it carries; nothing is stored.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from pear_calc import __version__
from pear_calc.calculators import CALCULATORS, calculate_module
from pear_calc.config import configure_logging, get_config
from pear_calc.emission_factors import dump_factor_table, get_factor_table
from pear_calc.schemas import ProductionWorkbook, parse_entries
from pear_calc.summary import calculate_production

logger = logging.getLogger(__name__)

_config = get_config()
configure_logging(_config.log_level)

app = FastAPI(
    title="PEAR Carbon Calculator – API",
    version=__version__,
    description="Per-module and production-level emissions from activity entries.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class EntriesRequest(BaseModel):
    """Body of ``POST /api/calculate/{module}``."""
    entries: list[dict[str, Any]]


def _factors():
    try:
        return get_factor_table()
    except EnvironmentError as exc:
        logger.error("Factor table unavailable: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.get("/api/health", summary="Liveness check")
def health():
    return {"status": "ok", "version": __version__}


@app.get("/api/factors", summary="Active emission factor table")
def factors():
    """Returns the table version, its source citations and every factor."""
    table = _factors()
    return {
        "version": table.version,
        "source": table.source,
        "electricitySource": table.electricity_source,
        "table": dump_factor_table(table),
    }


@app.post("/api/calculate/{module}", summary="Calculate one module")
def calculate(module: str, body: EntriesRequest):
    """
    Returns ``{module, entries, results, totals, metadata, errors}``.
    Entries that fail to calculate are listed in ``errors``; the rest still
    contribute to ``totals``.
    """
    if module not in CALCULATORS:
        raise HTTPException(status_code=404, detail=f"Unknown module: {module}")
    try:
        entries = parse_entries(module, body.entries)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=json.loads(exc.json())) from exc

    results = calculate_module(module, entries, _factors())
    return results.to_dict()


@app.post("/api/summary", summary="Production summary with GHG scope split")
def summary(workbook: ProductionWorkbook):
    """Runs every module and returns scope totals, module rows and PEAR metrics."""
    return calculate_production(workbook, _factors()).to_dict()
