"""Runtime settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Does not override variables already set in the environment
load_dotenv()


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    texture_workers: int = 4
    pdf_name: str = "print-layout.pdf"


def get_settings() -> Settings:
    """Read settings from the environment. Raises ValueError on a bad worker count."""
    workers_raw = os.getenv("PRINT_TILER_TEXTURE_WORKERS", "4")
    try:
        texture_workers = int(workers_raw)
    except ValueError:
        raise ValueError(f"PRINT_TILER_TEXTURE_WORKERS must be an integer, got '{workers_raw}'")
    if texture_workers < 1:
        raise ValueError("PRINT_TILER_TEXTURE_WORKERS must be at least 1")

    return Settings(
        log_level=os.getenv("PRINT_TILER_LOG_LEVEL", "INFO").upper(),
        texture_workers=texture_workers,
        pdf_name=os.getenv("PRINT_TILER_PDF_NAME", "print-layout.pdf"),
    )
