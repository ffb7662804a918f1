from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional

import pandas as pd


_NA_TOKENS = {"nan", "none", "null", "<na>", "nat"}


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: object) -> str:
    """Free-text cell as a stripped string; blanks become ''."""
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_identifier(value: object) -> Optional[str]:
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    s = str(value).strip()
    if not s or s.lower() in _NA_TOKENS:
        return None
    return s


def to_number(value: object, default: float = 0.0) -> float:
    if is_blank(value) or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    num = pd.to_numeric(value, errors="coerce")
    if pd.isna(num):
        return default
    out = float(num)
    if math.isinf(out):
        return default
    return out


def to_int(value: object) -> Optional[int]:
    num = to_number(value, default=math.nan)
    if math.isnan(num):
        return None
    return int(num)


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def pick(row: Mapping[str, Any], aliases: Iterable[str], default: Any = None) -> Any:
    """First non-blank value among the alias keys, in alias order."""
    for key in aliases:
        if key in row and not is_blank(row[key]):
            return row[key]
    return default


def has_any(row: Mapping[str, Any], aliases: Iterable[str]) -> bool:
    return pick(row, aliases) is not None
