"""
Identifier normalization and cell-to-text coercion.
"""
from __future__ import annotations

import datetime as dt
import string
from typing import Any

import pandas as pd

from rostermatch.config import ID_LENGTH, ID_PREFIX


# ---------------------------------------------------------------------------
# Cell coercion
# ---------------------------------------------------------------------------

def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def cell_text(value: Any) -> str:
    """Render a typed cell value as stripped text ("" for absent cells).

    Integral floats lose the ".0" Excel gives them, so a numeric identifier
    cell compares equal to the same number typed as text.
    """
    if is_blank(value):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dt.datetime, dt.date, pd.Timestamp)):
        return value.isoformat()
    return str(value).strip()


# ---------------------------------------------------------------------------
# Identifier normalization
# ---------------------------------------------------------------------------

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def strip_identifier_prefix(identifier: str) -> str:
    """Drop one leading prefix letter when the rest is a full-length identifier."""
    if identifier.startswith(ID_PREFIX) and len(identifier) - len(ID_PREFIX) == ID_LENGTH:
        return identifier[len(ID_PREFIX):]
    return identifier


def normalize_identifier(raw: Any, strip_prefix: bool = False) -> str:
    """Canonical form of an identifier for joining.

    Removes every whitespace character (spaces, tabs, newlines, carriage
    returns and the full-width space), uppercases ASCII letters (a trailing
    check digit "x" becomes "X"). With ``strip_prefix`` the leading "G" of a
    student number is removed as well. Total: any input maps to a string,
    already-normalized input maps to itself.
    """
    text = raw if isinstance(raw, str) else cell_text(raw)
    normalized = "".join(text.split()).translate(_ASCII_UPPER)
    if strip_prefix:
        normalized = strip_identifier_prefix(normalized)
    return normalized


def mask_identifier(identifier: str) -> str:
    """Mask an identifier for display: keep the first and last three characters."""
    if len(identifier) >= 6:
        return f"{identifier[:3]}****{identifier[-3:]}"
    return "****"
