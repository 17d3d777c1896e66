from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass(frozen=True)
class Settings:
    log_level: str
    run_env: str

    # Remote index
    index_url: str | None
    index_api_key: str | None
    index_api_key_header: str

    # Import batching / transport
    batch_size: int
    max_retries: int
    retry_backoff_seconds: float
    http_timeout_seconds: float | None
    dead_letter_path: str | None

    # Input
    field_delimiter: str

    # Collections per record shape
    tax_collection: str = "tax_records"
    company_collection: str = "companies"

    def collection_for(self, shape: str) -> str:
        return self.company_collection if shape == "company" else self.tax_collection


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    batch_size = int(os.getenv("BATCH_SIZE", "200"))
    if batch_size < 1:
        raise RuntimeError("BATCH_SIZE must be a positive integer")
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        run_env=os.getenv("RUN_ENV", "local"),
        index_url=os.getenv("INDEX_URL") or None,
        index_api_key=os.getenv("INDEX_API_KEY") or None,
        index_api_key_header=os.getenv("INDEX_API_KEY_HEADER", "X-TYPESENSE-API-KEY"),
        batch_size=batch_size,
        max_retries=int(os.getenv("MAX_RETRIES", "0")),
        retry_backoff_seconds=float(os.getenv("RETRY_BACKOFF_SECONDS", "1.0")),
        http_timeout_seconds=_optional_float(os.getenv("HTTP_TIMEOUT_SECONDS")),
        dead_letter_path=os.getenv("DEAD_LETTER_PATH") or None,
        field_delimiter=os.getenv("FIELD_DELIMITER", ","),
        tax_collection=os.getenv("TAX_COLLECTION", "tax_records"),
        company_collection=os.getenv("COMPANY_COLLECTION", "companies"),
    )
