"""Configuration helpers shared by the assistant, CLI and backend."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
CONTEXT_DIR = REPO_ROOT / "context"

DEFAULT_REFERENCE_FILES = "core=core_context.txt"


def _path_from_env(var_name: str, default: Path) -> Path:
    value = os.getenv(var_name)
    if value:
        return Path(value).expanduser()
    return default


def _coerce_int(value: Optional[str], fallback: int) -> int:
    try:
        return int(value) if value is not None else fallback
    except ValueError:
        return fallback


def _parse_reference_files(raw: str, base_dir: Path) -> Dict[str, Path]:
    """Parse "name=file,name=file" pairs; a bare file name is keyed by its stem."""
    files: Dict[str, Path] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, _, filename = entry.partition("=")
        if not filename:
            name, filename = Path(entry).stem, entry
        path = Path(filename.strip()).expanduser()
        files[name.strip()] = path if path.is_absolute() else base_dir / path
    return files


@dataclass
class AssistantConfig:
    """Holds runtime settings for the reference loader, assistant and backend."""

    reference_dir: Path
    reference_files: Dict[str, Path] = field(default_factory=dict)
    reference_max_lines: int = 5
    max_history_turns: int = 0
    max_input_length: int = 10000
    session_ttl_minutes: int = 90


def load_config() -> AssistantConfig:
    """Load configuration from .env with safe defaults."""

    reference_dir = _path_from_env("AUDIENCE_REFERENCE_DIR", CONTEXT_DIR)
    reference_files = _parse_reference_files(
        os.getenv("AUDIENCE_REFERENCE_FILES", DEFAULT_REFERENCE_FILES),
        reference_dir,
    )

    return AssistantConfig(
        reference_dir=reference_dir,
        reference_files=reference_files,
        reference_max_lines=_coerce_int(os.getenv("AUDIENCE_REFERENCE_MAX_LINES"), 5),
        max_history_turns=_coerce_int(os.getenv("MAX_HISTORY_TURNS"), 0),
        max_input_length=_coerce_int(os.getenv("MAX_MESSAGE_LENGTH"), 10000),
        session_ttl_minutes=_coerce_int(os.getenv("SESSION_TTL_MINUTES"), 90),
    )
