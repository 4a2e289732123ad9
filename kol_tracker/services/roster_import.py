"""Spreadsheet row import.

Turns loosely-typed spreadsheet rows (header -> cell) into ``KOLCreate``
payloads. The caller supplies the column mapping; nothing here guesses
which header means what.

Platform resolution per row:
1. Every URL in the profile-link cell (comma/newline separated) whose host is
   a known platform becomes a link (query and trailing slash stripped),
   follower count from that platform's column.
2. Platforms named in the free-text platform column that have no URL yet are
   added with an empty profile URL.
"""
from __future__ import annotations

import csv
import io
import math
import re
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from kol_tracker.config import IMPORT_SETTINGS
from kol_tracker.models.db.enums import SocialPlatform
from kol_tracker.models.schemas.imports import ColumnMapping, ImportValidationResult
from kol_tracker.models.schemas.kols import KOLCreate, PlatformLinkCreate
from kol_tracker.utils import get_logger
from kol_tracker.utils.link_processing import clean_link, detect_platforms, platform_from_url

logger = get_logger(__name__)

_SUFFIXES = {"k": 1_000, "m": 1_000_000, "b": 1_000_000_000}
_URL_SPLIT = re.compile(r"[,\n]")

# Spreadsheet rows are 1-indexed and the header takes row 1
FIRST_DATA_ROW = 2


def _round_half_up(number: float) -> int:
    return max(math.floor(number + 0.5), 0)


def parse_follower_count(value: Any) -> int:
    """Parse ``"1.2M"``, ``"520K"``, ``"12,500"`` or a number. Anything else is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return _round_half_up(value)
    if not isinstance(value, str):
        return 0

    text = re.sub(r"[,\s]", "", value.strip().lower())
    if not text:
        return 0

    multiplier = 1
    if text[-1] in _SUFFIXES:
        multiplier = _SUFFIXES[text[-1]]
        text = text[:-1]

    try:
        number = float(text)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return _round_half_up(number * multiplier)


def _cell(row: Mapping[str, Any], column: Optional[str]) -> str:
    if not column:
        return ""
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def _follower_column(mapping: ColumnMapping, platform: SocialPlatform) -> Optional[str]:
    return getattr(mapping, f"{platform.value}_followers", None)


def _followers_for(row: Mapping[str, Any], mapping: ColumnMapping, platform: SocialPlatform) -> int:
    column = _follower_column(mapping, platform)
    if not column:
        return 0
    return parse_follower_count(row.get(column))


def validate_row(
    row: Mapping[str, Any],
    mapping: Optional[ColumnMapping] = None,
    row_number: int = FIRST_DATA_ROW,
) -> ImportValidationResult:
    """Validate one row and build its ``KOLCreate`` payload.

    Errors make the row invalid (missing name, fields the KOL schema rejects);
    warnings (no platforms, no email) do not.
    """
    mapping = mapping or ColumnMapping()
    errors: list[str] = []
    warnings: list[str] = []

    name = _cell(row, mapping.name)
    if not name:
        errors.append("Name is required")
        return ImportValidationResult(valid=False, row_number=row_number, errors=errors)

    links: list[PlatformLinkCreate] = []
    seen: set[SocialPlatform] = set()

    for url in (u.strip() for u in _URL_SPLIT.split(_cell(row, mapping.profile_link))):
        platform = platform_from_url(url) if url else None
        if platform is None:
            continue
        links.append(PlatformLinkCreate(
            platform=platform,
            profile_url=clean_link(url),
            follower_count=_followers_for(row, mapping, platform),
        ))
        seen.add(platform)

    for platform in detect_platforms(_cell(row, mapping.platform)):
        if platform in seen:
            continue
        links.append(PlatformLinkCreate(
            platform=platform,
            profile_url="",
            follower_count=_followers_for(row, mapping, platform),
        ))
        seen.add(platform)

    email = _cell(row, mapping.email) or None

    if not links:
        warnings.append("No platforms detected")
    if not email:
        warnings.append("No email provided")

    try:
        data = KOLCreate(
            name=name,
            email=email,
            telegram_handle=_cell(row, mapping.telegram_handle) or None,
            notes=_cell(row, mapping.notes) or None,
            platforms=links,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err.get("loc", ()))
            errors.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
        return ImportValidationResult(valid=False, row_number=row_number, errors=errors, warnings=warnings)

    return ImportValidationResult(valid=True, row_number=row_number, warnings=warnings, data=data)


def check_row_limit(rows: list[Any]) -> None:
    """Reject an import larger than ``IMPORT_SETTINGS["max_rows"]``."""
    max_rows = int(IMPORT_SETTINGS["max_rows"])  # type: ignore[arg-type]
    if len(rows) > max_rows:
        raise ValueError(f"Import has {len(rows)} rows; the limit is {max_rows}")


def parse_csv(text: str) -> list[dict[str, Any]]:
    """Parse CSV text with a header row into header -> cell dicts.

    Fully blank lines are skipped. A leading UTF-8 BOM (Excel exports) is dropped.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.DictReader(io.StringIO(text))
    rows = []
    for record in reader:
        cleaned = {(k or "").strip(): v for k, v in record.items() if k is not None}
        if any((v or "").strip() for v in cleaned.values() if isinstance(v, str)):
            rows.append(cleaned)
    logger.debug("CSV parsed", row_count=len(rows), headers=reader.fieldnames)
    return rows


__all__ = [
    "FIRST_DATA_ROW",
    "parse_follower_count",
    "validate_row",
    "check_row_limit",
    "parse_csv",
]
