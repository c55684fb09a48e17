from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "historical" / "curated_history.json"


@dataclass(frozen=True)
class RepositoryConfig:
    cutoff_date: str = "2026-12-31"  # latest date any generated record may carry
    synthetic_start: str = "2025-01-01"
    seed: str | None = None  # None -> nondeterministic series
    catalog_path: Path = DEFAULT_CATALOG_PATH
    base_currency: str = "SAR"


def get_repository_config() -> RepositoryConfig:
    return RepositoryConfig(
        cutoff_date=os.getenv("VRU_CUTOFF_DATE", "2026-12-31"),
        synthetic_start=os.getenv("VRU_SYNTHETIC_START", "2025-01-01"),
        seed=os.getenv("VRU_SEED") or None,
        catalog_path=Path(os.getenv("VRU_CATALOG_PATH", str(DEFAULT_CATALOG_PATH))),
    )


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000


def get_server_config() -> ServerConfig:
    return ServerConfig(
        host=os.getenv("VRU_HOST", "0.0.0.0"),
        port=int(os.getenv("VRU_PORT", "8000")),
    )
