"""Reading and writing the JSON exports the CLI works on."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from checkshappy.cli.formatters.json_formatter import to_jsonable
from checkshappy.config import get_logger, get_settings_for_cli
from checkshappy.config.settings import ChecksHappySettings
from checkshappy.exceptions import (
    ChecksHappyError,
    ChecksHappyFileNotFoundError,
    ValidationError,
)
from checkshappy.models import ParsedScene, ProductionSchedule, Scene

logger = get_logger(__name__)

T = TypeVar("T")

_SCENES = TypeAdapter(list[Scene])
_PARSED_SCENES = TypeAdapter(list[ParsedScene])
_SCHEDULE = TypeAdapter(ProductionSchedule)


def load_settings(config: Path | None) -> ChecksHappySettings:
    """Load settings, optionally from an explicit config file.

    Raises:
        ChecksHappyFileNotFoundError: If the config file does not exist
    """
    try:
        return get_settings_for_cli(config_file=config)
    except FileNotFoundError as e:
        raise ChecksHappyFileNotFoundError(
            message=f"Config file not found: {config}",
            hint="Pass an existing YAML, TOML or JSON file to --config",
            details={"path": str(config)},
        ) from e


def _load(path: Path, adapter: TypeAdapter[T], kind: str) -> T:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise ChecksHappyFileNotFoundError(
            message=f"{kind.capitalize()} file not found: {path}",
            hint="Check that the file path is correct",
            details={"path": str(path)},
        ) from e

    try:
        data = adapter.validate_json(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise ValidationError(
            message=f"Invalid {kind} file: {path}",
            hint=f"{location}: {first['msg']}",
            details={"path": str(path), "error_count": e.error_count()},
        ) from e

    logger.debug("Loaded input file", path=str(path), kind=kind)
    return data


def load_scenes(path: Path) -> list[Scene]:
    """Load the production's scene list (breakdown export)."""
    return _load(path, _SCENES, "scenes")


def load_parsed_scenes(path: Path) -> list[ParsedScene]:
    """Load the scenes parsed from a revised script."""
    return _load(path, _PARSED_SCENES, "parsed scenes")


def load_schedule(path: Path) -> ProductionSchedule:
    """Load a production schedule export."""
    return _load(path, _SCHEDULE, "schedule")


def write_json(path: Path, data: Any) -> None:
    """Write models or engine results as pretty-printed camelCase JSON."""
    try:
        path.write_text(
            json.dumps(to_jsonable(data), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise ChecksHappyError(
            message=f"Could not write {path}",
            hint="Check that the directory exists and is writable",
            details={"path": str(path), "error": str(e)},
        ) from e
    logger.debug("Wrote output file", path=str(path))
