"""
config.py – Load runtime settings from environment variables.

All configuration is optional and read from environment variables (or a
.env file at the repository root).  Call `get_config()` once at startup to
obtain a validated Config object.

Variables
---------
PEAR_LOG_LEVEL          logging level name (default INFO)
PEAR_FACTORS_FILE       JSON factor table replacing the built-in one
PEAR_API_CORS_ORIGINS   comma-separated origins for the HTTP API (default *)
PEAR_OUTPUT_DIR         default directory for CLI result files (default out)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Package root: pear_calc/
_PACKAGE_ROOT = Path(__file__).resolve().parent
# Repository root (so .env can live next to pyproject.toml)
_REPO_ROOT = _PACKAGE_ROOT.parent

# Load .env from the repo root first, then the package dir (package overrides).
# override=True ensures .env values always win over stale OS-level env vars.
_env_repo = _REPO_ROOT / ".env"
_env_package = _PACKAGE_ROOT / ".env"
if _env_repo.exists():
    load_dotenv(_env_repo, override=True)
if _env_package.exists():
    load_dotenv(_env_package, override=True)

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(message)s"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Validated runtime configuration."""

    log_level: str = "INFO"
    factors_file: str | None = None
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    output_dir: str = "out"


def get_config() -> Config:
    """
    Read environment variables, validate them, and return a Config.

    Raises
    ------
    EnvironmentError
        If ``PEAR_LOG_LEVEL`` is not a logging level name or
        ``PEAR_FACTORS_FILE`` names a file that does not exist.
    """
    level = os.environ.get("PEAR_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if level not in _LOG_LEVELS:
        raise EnvironmentError(
            f"PEAR_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {level!r}"
        )

    cfg = Config(log_level=level)

    origins = os.environ.get("PEAR_API_CORS_ORIGINS", "").strip()
    if origins:
        cfg.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]

    cfg.output_dir = os.environ.get("PEAR_OUTPUT_DIR", "").strip() or cfg.output_dir

    # Resolve a relative factor-table path so it works regardless of cwd.
    factors_file = os.environ.get("PEAR_FACTORS_FILE", "").strip()
    if factors_file:
        path = Path(factors_file)
        if not path.is_absolute():
            path = (_REPO_ROOT / path).resolve()
        if not path.exists():
            raise EnvironmentError(f"PEAR_FACTORS_FILE not found: {path}")
        cfg.factors_file = str(path)

    return cfg


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging once for CLI and API entry points."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
