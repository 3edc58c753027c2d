"""
Deterministic JSON serialization for signed calls, events and state exports.

Rules:
1. Keys sorted lexicographically at every nesting level
2. No whitespace between tokens
3. Integers only; floats, NaN and Infinity are rejected (timestamps and salts are integers)
4. Strings: Unicode NFC normalization
5. Arrays preserve declared order
6. Null values: omitted
7. Boolean values: literal true or false
"""

from typing import Optional
import unicodedata
import json


def canonical(value) -> str:
    """Serialize a dict/list/scalar to its canonical JSON string."""
    result = _stringify(value)
    return "null" if result is None else result


def normalize(text: str) -> str:
    """NFC-normalize a string."""
    return unicodedata.normalize("NFC", text)


def _stringify(value) -> Optional[str]:
    if value is None:
        return None

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        raise ValueError("NameRegistrar: floats are not allowed in canonical form")

    if isinstance(value, str):
        return json.dumps(normalize(value), ensure_ascii=False)

    if isinstance(value, (list, tuple)):
        parts = [_stringify(v) for v in value]
        filtered = [p for p in parts if p is not None]
        return "[" + ",".join(filtered) + "]"

    if isinstance(value, dict):
        parts = []
        for key in sorted(value.keys()):
            val = _stringify(value[key])
            if val is not None:
                parts.append(json.dumps(normalize(key), ensure_ascii=False) + ":" + val)
        return "{" + ",".join(parts) + "}"

    raise TypeError(f"NameRegistrar: unsupported type {type(value)}")
