"""
RFC 8785 JSON Canonicalization Scheme (JCS).

Produces a deterministic, byte-identical JSON representation so that a
claim signed on one platform verifies on any other.

Key rules (RFC 8785 §3):
  1. Sort object keys by their UTF-16 code units.
  2. No insignificant whitespace.
  3. Numbers serialized per ES2015 Number.prototype.toString().
  4. Strings serialized per ES2015 JSON.stringify() (no optional escapes).
  5. Applied recursively to nested structures.

Values without a canonical form (NaN, Infinity, integers outside the
IEEE-754 exact range, lone surrogates, non-JSON types) raise EncodingError.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from .errors import EncodingError, SizeExceeded

# Largest integer an IEEE-754 double holds exactly.
MAX_SAFE_INTEGER = 2**53 - 1

_SHORT_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}


def _serialize_string(s: str) -> str:
    """Serialize a string per JCS / ES2015 rules.

    Mandatory escapes: \\, ", and control chars U+0000..U+001F.
    """
    buf: list[str] = ['"']
    for ch in s:
        cp = ord(ch)
        if ch in _SHORT_ESCAPES:
            buf.append(_SHORT_ESCAPES[ch])
        elif cp < 0x20:
            buf.append(f'\\u{cp:04x}')
        elif 0xD800 <= cp <= 0xDFFF:
            raise EncodingError(
                f"lone surrogate U+{cp:04X} has no UTF-8 encoding",
                details={"code_point": cp},
            )
        else:
            buf.append(ch)
    buf.append('"')
    return ''.join(buf)


def _shortest_digits(x: float) -> tuple[str, int]:
    """Return (digits, n) with x == 0.<digits> * 10**n for positive finite x.

    ``repr`` yields the shortest round-tripping decimal, the same digit
    string ES2015 picks.
    """
    r = repr(x)
    if 'e' in r:
        mantissa, exp = r.split('e')
        exponent = int(exp)
    else:
        mantissa, exponent = r, 0
    if '.' in mantissa:
        int_part, frac = mantissa.split('.')
    else:
        int_part, frac = mantissa, ''
    digits = int_part + frac
    point = len(int_part) + exponent
    stripped = digits.lstrip('0')
    point -= len(digits) - len(stripped)
    return stripped.rstrip('0'), point


def _serialize_float(x: float) -> str:
    if math.isnan(x) or math.isinf(x):
        raise EncodingError("NaN/Infinity not allowed in JCS", details={"value": repr(x)})
    if x == 0:
        return '0'  # also covers -0.0
    sign = '-' if x < 0 else ''
    digits, n = _shortest_digits(abs(x))
    k = len(digits)

    if k <= n <= 21:
        body = digits + '0' * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + '.' + digits[n:]
    elif -6 < n <= 0:
        body = '0.' + '0' * (-n) + digits
    else:
        e = n - 1
        exp = f"e{'+' if e >= 0 else '-'}{abs(e)}"
        if k == 1:
            body = digits + exp
        else:
            body = digits[0] + '.' + digits[1:] + exp
    return sign + body


def _serialize_number(n: int | float) -> str:
    """Serialize a number per JCS / ES2015 Number.toString()."""
    if isinstance(n, bool):
        # bool is subclass of int in Python
        raise EncodingError("bool is not a JSON number")

    if isinstance(n, int):
        if abs(n) > MAX_SAFE_INTEGER:
            raise EncodingError(
                f"integer {n} is outside the exactly representable range",
                details={"value": n, "limit": MAX_SAFE_INTEGER},
            )
        return str(n)

    return _serialize_float(float(n))


def _sort_key(key: str) -> bytes:
    # UTF-16BE byte order is code-unit order (RFC 8785 §3.2.3).
    return key.encode('utf-16-be', 'surrogatepass')


def _serialize(obj: Any) -> str:
    if obj is None:
        return 'null'
    if isinstance(obj, bool):
        return 'true' if obj else 'false'
    if isinstance(obj, Enum):
        return _serialize(obj.value)
    if isinstance(obj, (int, float)):
        return _serialize_number(obj)
    if isinstance(obj, str):
        return _serialize_string(obj)
    if isinstance(obj, (list, tuple)):
        inner = ','.join(_serialize(item) for item in obj)
        return f'[{inner}]'
    if isinstance(obj, dict):
        for k in obj:
            if not isinstance(k, str):
                raise EncodingError(f"object key must be str, got {type(k).__name__}")
        pairs = [
            f'{_serialize_string(k)}:{_serialize(obj[k])}'
            for k in sorted(obj, key=_sort_key)
        ]
        return '{' + ','.join(pairs) + '}'
    # Pydantic models: convert to dict first
    if hasattr(obj, 'model_dump'):
        return _serialize(obj.model_dump(mode='python', exclude_none=True))
    raise EncodingError(f"Cannot JCS-serialize type {type(obj).__name__}")


def canonicalize_json(obj: Any) -> str:
    """Return the JCS canonical string."""
    return _serialize(obj)


def canonicalize(obj: Any, max_size: int | None = None) -> bytes:
    """Return the JCS (RFC 8785) canonical bytes of a JSON-compatible object.

    When *max_size* is given, raise SizeExceeded instead of returning more
    than that many bytes.
    """
    data = _serialize(obj).encode('utf-8')
    if max_size is not None and len(data) > max_size:
        raise SizeExceeded(len(data), max_size)
    return data
