"""Sheet and output file naming rules."""

from __future__ import annotations

import re
from typing import Container, Optional

MAX_SHEET_NAME_LENGTH = 31
BASE_LABEL_LENGTH = 25
AUDIT_SUFFIX = "_Audit"
FALLBACK_SHEET_NAME = "Sheet1"
FALLBACK_OUTPUT_NAME = "Output.xlsx"
RESERVED_SHEET_NAMES = frozenset({"history"})

KNOWN_EXTENSIONS = (".txt", ".pipe", ".psv", ".csv")
_EXTENSION_PATTERN = re.compile(
    r"(?:" + "|".join(re.escape(ext) for ext in KNOWN_EXTENSIONS) + r")$",
    flags=re.IGNORECASE,
)
_FORBIDDEN_CHARACTERS = re.compile(r"[\[\]\*/\\\?:]")
_AUDIT_MARKER = re.compile(r"_*Audit_*")


def strip_known_extension(file_name: str) -> str:
    """Remove a trailing ``.txt``/``.pipe``/``.psv``/``.csv`` extension."""

    return _EXTENSION_PATTERN.sub("", file_name)


def derive_sheet_name(file_name: str) -> str:
    """Derive a candidate sheet name from a source file name.

    Files mentioning ``service`` or ``emr`` map to ``EMR``, files mentioning
    ``lab`` map to ``Lab``; anything else uses the file name without its
    extension, cut to 25 characters. ``_Audit`` is appended for audit files.
    The result is cleaned of characters spreadsheets reject, never wrapped in
    single quotes, at most 31 characters long and never the reserved
    ``History`` name. It is not guaranteed unique; see
    :func:`make_unique_sheet_name`.
    """

    lowered = file_name.lower()
    if "service" in lowered or "emr" in lowered:
        label = "EMR"
    elif "lab" in lowered:
        label = "Lab"
    else:
        label = strip_known_extension(file_name)[:BASE_LABEL_LENGTH]

    if "audit" in lowered and not label.lower().endswith("audit"):
        if len(label) + len(AUDIT_SUFFIX) > MAX_SHEET_NAME_LENGTH:
            label = label[: MAX_SHEET_NAME_LENGTH - len(AUDIT_SUFFIX)]
        label = f"{label}{AUDIT_SUFFIX}"

    label = _FORBIDDEN_CHARACTERS.sub("", label)
    label = label.strip("'")
    label = label[:MAX_SHEET_NAME_LENGTH].rstrip("'")

    if not label.strip():
        return FALLBACK_SHEET_NAME
    if label.lower() in RESERVED_SHEET_NAMES:
        label = f"{label}_1"
    return label


def make_unique_sheet_name(candidate: str, used: Container[str]) -> str:
    """Return ``candidate`` or the first free ``<prefix>_N`` variant.

    ``used`` holds casefolded names already taken. The prefix is ``candidate``
    cut to ``31 - len("_N")`` characters so that every generated name fits the
    sheet name limit, whatever the number of digits in ``N``.
    """

    if candidate.casefold() not in used:
        return candidate

    suffix = 1
    while True:
        tail = f"_{suffix}"
        name = f"{candidate[: MAX_SHEET_NAME_LENGTH - len(tail)]}{tail}"
        if name.casefold() not in used:
            return name
        suffix += 1


def ensure_xlsx_suffix(file_name: str) -> str:
    """Append ``.xlsx`` unless ``file_name`` already ends with it."""

    name = file_name.strip()
    if name.lower().endswith(".xlsx"):
        return name
    return f"{name}.xlsx"


def derive_output_file_name(source_name: Optional[str]) -> str:
    """Name of the workbook produced from a single source file.

    ``Lab_Results_Audit.txt`` becomes ``Lab_Results.xlsx``; names that end up
    empty fall back to ``Output.xlsx``.
    """

    if not source_name:
        return FALLBACK_OUTPUT_NAME
    base = strip_known_extension(source_name.strip())
    base = _AUDIT_MARKER.sub("_", base).strip("_").strip()
    if not base:
        return FALLBACK_OUTPUT_NAME
    return f"{base}.xlsx"


__all__ = [
    "FALLBACK_OUTPUT_NAME",
    "FALLBACK_SHEET_NAME",
    "KNOWN_EXTENSIONS",
    "MAX_SHEET_NAME_LENGTH",
    "derive_output_file_name",
    "derive_sheet_name",
    "ensure_xlsx_suffix",
    "make_unique_sheet_name",
    "strip_known_extension",
]
