"""
io_utils.py – Workbook loading and result writers.

A workbook is a JSON object with one array per module, using the same
camelCase keys the browser form layer produces:

    {
      "productionName": "Pilot",
      "transport":  [{"id": "t1", "mode": "road", "fuelType": "petrol", ...}],
      "utilities":  [...],
      "fuel":       [...],
      ...
    }

Writers create parent directories automatically via
``Path.mkdir(parents=True)``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pear_calc.constants import OUT_FACTORS, OUT_RESULTS
from pear_calc.emission_factors import EmissionFactorTable, dump_factor_table
from pear_calc.schemas import ProductionWorkbook


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Serialise *data* to JSON at *path*, creating parents as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=indent, ensure_ascii=False, default=str)


def read_json(path: Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as fh:
        return json.load(fh)


# ─────────────────────────────────────────────────────────────
# Workbooks
# ─────────────────────────────────────────────────────────────

def load_workbook(path: Path) -> ProductionWorkbook:
    """
    Read and validate a workbook JSON file.

    Raises
    ------
    OSError
        If the file cannot be read.
    json.JSONDecodeError
        If the file is not JSON.
    pydantic.ValidationError
        If an entry has the wrong shape.
    """
    return ProductionWorkbook.model_validate(read_json(path))


# ─────────────────────────────────────────────────────────────
# Writers
# ─────────────────────────────────────────────────────────────

def write_results(payload: dict[str, Any], path: Path | None = None, outdir: Path | None = None) -> Path:
    """
    Write a results dict (``ModuleResults.to_dict()`` or a production
    summary) and return the output path.  Defaults to ``<outdir>/results.json``.
    """
    dest = Path(path) if path is not None else Path(outdir or ".") / OUT_RESULTS
    _write_json(dest, payload)
    return dest


def write_factor_table(
    table: EmissionFactorTable, path: Path | None = None, outdir: Path | None = None
) -> Path:
    """Dump *table* as JSON (readable by ``load_factor_table``) and return the path."""
    dest = Path(path) if path is not None else Path(outdir or ".") / OUT_FACTORS
    _write_json(dest, dump_factor_table(table))
    return dest
