"""Configuration loading utilities for pipe2excel."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_DELIMITER = "|"
DEFAULT_CHUNK_SIZE = 5000
DEFAULT_OUTPUT_NAME = "Combined.xlsx"


@dataclass(frozen=True)
class ConverterConfig:
    """Tuning knobs for one conversion call.

    Instances are immutable and passed explicitly into the pipeline so that
    conversions with different settings never interfere with each other.
    """

    delimiter: str = DEFAULT_DELIMITER
    chunk_size: int = DEFAULT_CHUNK_SIZE
    yield_every: int = 1
    column_check_threshold: int = 1_000_000
    column_sample_rows: int = 100
    large_input_warning: int = 100_000_000
    default_output_name: str = DEFAULT_OUTPUT_NAME

    def __post_init__(self) -> None:
        if not isinstance(self.delimiter, str) or len(self.delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {self.delimiter!r}")
        for name in ("chunk_size", "yield_every", "column_sample_rows"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        for name in ("column_check_threshold", "large_input_warning"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if not str(self.default_output_name).strip():
            raise ValueError("default_output_name must not be empty")

    def with_overrides(self, **overrides: Any) -> "ConverterConfig":
        """Return a copy with the non-``None`` overrides applied."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        if not applied:
            return self
        return replace(self, **applied)


def load_config(path: Optional[str | Path] = None) -> ConverterConfig:
    """Load :class:`ConverterConfig` from a YAML file.

    Parameters
    ----------
    path:
        Location of the YAML file. ``None`` returns the defaults.

    The settings live under an optional ``converter`` section; a file without
    that section is read as the section itself.
    """

    if path is None:
        return ConverterConfig()

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file '{config_path}' does not exist")

    with config_path.open("r", encoding="utf-8") as stream:
        raw_config: Mapping[str, Any] = yaml.safe_load(stream) or {}

    if not isinstance(raw_config, Mapping):
        raise ValueError("Configuration root must be a mapping")

    section = raw_config.get("converter", raw_config)
    if not isinstance(section, Mapping):
        raise ValueError("The 'converter' section must be a mapping")

    return ConverterConfig(**_parse_converter_section(section))


def _parse_converter_section(section: Mapping[str, Any]) -> Dict[str, Any]:
    known = {field_info.name for field_info in fields(ConverterConfig)}
    unknown = sorted(str(key) for key in section if key not in known)
    if unknown:
        raise ValueError("Unknown converter settings: " + ", ".join(unknown))

    parsed: Dict[str, Any] = dict(section)
    if "delimiter" in parsed:
        parsed["delimiter"] = _normalise_delimiter(parsed["delimiter"])
    return parsed


def _normalise_delimiter(value: Any) -> str:
    text = "" if value is None else str(value)
    if text.lower() in {"tab", "\\t"}:
        return "\t"
    return text


__all__ = [
    "ConverterConfig",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_DELIMITER",
    "DEFAULT_OUTPUT_NAME",
    "load_config",
]
