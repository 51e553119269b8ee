from __future__ import annotations

"""Column / property name normalization helpers.

Header text in real workbooks is noisy ("Emp. Id", "First_Name", "E-mail\\n").
Matching is done on the ASCII alphanumeric skeleton of a name, compared
case-insensitively.
"""

__all__ = [
    "normalize",
    "equals_normalized",
    "normalized_key",
    "strip_control",
]

_CONTROL_CHARS = str.maketrans("", "", "\n\r\t\v\f")


def _is_ascii_alnum(c: str) -> bool:
    return ("0" <= c <= "9") or ("A" <= c <= "Z") or ("a" <= c <= "z")


def normalize(s: str) -> str:
    """Keep only ASCII letters and digits of ``s`` (order preserved)."""
    return "".join(c for c in s if _is_ascii_alnum(c))


def equals_normalized(a: str, b: str) -> bool:
    """Compare two names by their normalized form, ignoring case."""
    return normalize(a).casefold() == normalize(b).casefold()


def normalized_key(s: str) -> str:
    """Dictionary key form of a name (normalized + case-folded)."""
    return normalize(s).casefold()


def strip_control(s: str) -> str:
    """Remove tab / newline style control characters (Excel の改行入りヘッダ対策)."""
    return s.translate(_CONTROL_CHARS)
