from __future__ import annotations

import hashlib
import math
from collections.abc import Mapping
from typing import Any

__all__ = [
    "SIGN_FIELD",
    "number_text",
    "stringify",
    "canonicalize",
    "sign",
]

SIGN_FIELD = "sign"


def number_text(value: float) -> str:
    """Render a float as ECMAScript ``Number::toString`` does.

    Plain decimal notation for ``1e-7 <= |x| < 1e21``, otherwise exponent
    form with an explicit sign and no zero padding (``1e+21``, ``1.5e-7``).
    Integral values in range print without a fraction (``5.0`` -> ``5``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    mantissa, _, exp = repr(abs(value)).partition("e")
    whole, _, frac = mantissa.partition(".")

    # value == 0.<digits> * 10**point, with digits free of leading/trailing zeros
    raw = whole + frac
    point = len(whole) + (int(exp) if exp else 0)
    stripped = raw.lstrip("0")
    point -= len(raw) - len(stripped)
    digits = stripped.rstrip("0")
    k = len(digits)

    if k <= point <= 21:
        return sign + digits + "0" * (point - k)
    if 0 < point <= 21:
        return f"{sign}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"

    e = point - 1
    exponent = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return sign + digits + exponent
    return f"{sign}{digits[0]}.{digits[1:]}{exponent}"


def stringify(value: Any) -> str:
    """Render a field value the way the upstream signer renders it.

    Rules:
    - Strings are used verbatim.
    - Booleans become ``true``/``false``; ``None`` becomes ``null``.
    - Integers print as-is; floats follow ``number_text`` (``5.0`` -> ``5``,
      ``1e21`` -> ``1e+21``).
    - Lists are comma-joined, with ``None`` members rendered empty.
    - Mappings collapse to ``[object Object]``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return number_text(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else stringify(v) for v in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def canonicalize(params: Mapping[str, Any], secret: str) -> str:
    """Build the string that gets hashed: sorted ``key=value`` pairs plus the secret.

    The ``sign`` field is excluded, so a request may be re-signed in place.
    """
    pairs = [f"{key}={stringify(params[key])}" for key in sorted(params) if key != SIGN_FIELD]
    return f"{'&'.join(pairs)}&{secret}"


def sign(params: Mapping[str, Any], secret: str) -> str:
    """Return the lowercase hex MD5 digest of the canonical form of ``params``."""
    return hashlib.md5(canonicalize(params, secret).encode("utf-8")).hexdigest()
