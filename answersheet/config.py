"""Configuration for the answer-sheet service.

Configuration is loaded with the following rules:
- Primary source: `answersheet_config.json` at the project root.
- Overrides: environment variables (a local `.env` is honoured), then
  optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator, model_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("answersheet_config.json")
logger = logging.getLogger(__name__)

DEFAULT_WORD_MEANING_SHEET = "単語の意味"
DEFAULT_FILL_BLANK_SHEET = "空所補充"
BACKEND_KINDS = {"memory", "sql", "gsheets"}
RESPONSE_LAYOUTS = {"compact", "extension"}


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _as_bool(text: object) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


class StoreConfig(BaseModel):
    """Identity of the spreadsheet and the labels of its two partitions."""

    spreadsheet_id: Optional[str] = None
    word_meaning_sheet: str = DEFAULT_WORD_MEANING_SHEET
    fill_blank_sheet: str = DEFAULT_FILL_BLANK_SHEET
    auto_provision: bool = Field(default=True)

    @field_validator("word_meaning_sheet", "fill_blank_sheet")
    @classmethod
    def sheet_name_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("sheet names must be non-empty strings")
        return v.strip()

    @model_validator(mode="after")
    def sheet_names_must_differ(self) -> "StoreConfig":
        if self.word_meaning_sheet == self.fill_blank_sheet:
            raise ValueError("word_meaning_sheet and fill_blank_sheet must differ")
        return self


class BackendConfig(BaseModel):
    kind: str = "memory"
    database_url: Optional[str] = None
    credentials_file: Optional[str] = None
    auto_apply_migrations: bool = Field(default=True)

    @field_validator("kind")
    @classmethod
    def kind_must_be_allowed(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in BACKEND_KINDS:
            raise ValueError(f"backend.kind must be one of {sorted(BACKEND_KINDS)}")
        return v

    @model_validator(mode="after")
    def gsheets_needs_credentials(self) -> "BackendConfig":
        if self.kind == "gsheets" and not self.credentials_file:
            raise ValueError("backend.credentials_file is required for the gsheets backend")
        return self


class ResponseConfig(BaseModel):
    layout: str = "compact"

    @field_validator("layout")
    @classmethod
    def layout_must_be_allowed(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in RESPONSE_LAYOUTS:
            raise ValueError(f"response.layout must be one of {sorted(RESPONSE_LAYOUTS)}")
        return v


class ErrorsConfig(BaseModel):
    include_stack: bool = Field(default=False)


class CorsConfig(BaseModel):
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    response: ResponseConfig = Field(default_factory=ResponseConfig)
    errors: ErrorsConfig = Field(default_factory=ErrorsConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables (including a local `.env`)
    2) Text files in `config/` (optional)
    3) answersheet_config.json at project root (primary base)
    4) Safe defaults for development
    """

    load_dotenv(dotenv_path=Path(".env"), override=False)
    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Any:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return [str(v) for v in cur]
        return str(cur) if cur is not None else default

    def _pick(env_key: str, file_key: str, base_path: str, default: Optional[str] = None) -> Any:
        return _env(env_key) or _read_config_file(file_key) or _base(base_path, default)

    # Store
    spreadsheet_id = _pick("SPREADSHEET_ID", "store.spreadsheet_id", "store.spreadsheet_id")
    word_meaning = _pick("WORD_MEANING_SHEET_NAME", "store.word_meaning_sheet", "store.word_meaning_sheet", DEFAULT_WORD_MEANING_SHEET)
    fill_blank = _pick("FILL_BLANK_SHEET_NAME", "store.fill_blank_sheet", "store.fill_blank_sheet", DEFAULT_FILL_BLANK_SHEET)
    auto_provision = _pick("AUTO_PROVISION_SHEETS", "store.auto_provision", "store.auto_provision", "true")

    # Backend
    backend_kind = _pick("SHEET_BACKEND", "backend.kind", "backend.kind", "memory")
    database_url = _pick("DATABASE_URL", "backend.database_url", "backend.database_url")
    credentials = _pick("GOOGLE_APPLICATION_CREDENTIALS", "backend.credentials_file", "backend.credentials_file")
    auto_migrate = _pick("AUTO_APPLY_MIGRATIONS", "backend.auto_apply_migrations", "backend.auto_apply_migrations", "true")

    # Envelope shaping
    layout = _pick("RESPONSE_LAYOUT", "response.layout", "response.layout", "compact")
    include_stack = _pick("ERRORS_INCLUDE_STACK", "errors.include_stack", "errors.include_stack", "false")
    origins_raw = _pick("CORS_ALLOW_ORIGINS", "cors.allow_origins", "cors.allow_origins", "*")
    # Env and text files give a comma-separated string; the JSON file may give a list
    origins_list = origins_raw if isinstance(origins_raw, list) else str(origins_raw).split(",")
    origins = [o.strip() for o in origins_list if o.strip()]

    try:
        cfg = AppConfig(
            store=StoreConfig(
                spreadsheet_id=spreadsheet_id,
                word_meaning_sheet=str(word_meaning),
                fill_blank_sheet=str(fill_blank),
                auto_provision=_as_bool(auto_provision),
            ),
            backend=BackendConfig(
                kind=str(backend_kind),
                database_url=database_url,
                credentials_file=credentials,
                auto_apply_migrations=_as_bool(auto_migrate),
            ),
            response=ResponseConfig(layout=str(layout)),
            errors=ErrorsConfig(include_stack=_as_bool(include_stack)),
            cors=CorsConfig(allow_origins=origins or ["*"]),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "StoreConfig",
    "BackendConfig",
    "ResponseConfig",
    "ErrorsConfig",
    "CorsConfig",
    "load_config",
]
