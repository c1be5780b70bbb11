from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    cors_origins: tuple[str, ...]
    catalog_path: Path | None
    log_level: str


def load_app_config() -> AppConfig:
    cors_origins_raw = os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    )
    cors_origins = tuple(
        origin.strip() for origin in cors_origins_raw.split(",") if origin.strip()
    )

    catalog_path_raw = os.getenv("TIMELINE_CATALOG_PATH", "").strip()

    return AppConfig(
        cors_origins=cors_origins,
        catalog_path=Path(catalog_path_raw).expanduser() if catalog_path_raw else None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
