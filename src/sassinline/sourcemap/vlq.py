"""Base64 VLQ codec used by the ``mappings`` field of v3 source maps."""

from __future__ import annotations

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_INDEX = {char: i for i, char in enumerate(_ALPHABET)}

_SHIFT = 5
_CONTINUATION = 1 << _SHIFT
_DIGIT_MASK = _CONTINUATION - 1


def encode_value(value: int) -> str:
    """Encode one signed integer."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    chars: list[str] = []
    while True:
        digit = vlq & _DIGIT_MASK
        vlq >>= _SHIFT
        if vlq:
            digit |= _CONTINUATION
        chars.append(_ALPHABET[digit])
        if not vlq:
            return "".join(chars)


def encode_values(values: list[int] | tuple[int, ...]) -> str:
    return "".join(encode_value(v) for v in values)


def decode_values(segment: str) -> list[int]:
    """Decode every integer packed into *segment*.

    Raises :class:`ValueError` on characters outside the base64 alphabet or a
    truncated trailing value.
    """
    values: list[int] = []
    value = 0
    shift = 0
    for char in segment:
        digit = _INDEX.get(char)
        if digit is None:
            raise ValueError(f"Invalid base64 VLQ character {char!r} in {segment!r}")
        value += (digit & _DIGIT_MASK) << shift
        if digit & _CONTINUATION:
            shift += _SHIFT
            continue
        negative = value & 1
        value >>= 1
        values.append(-value if negative else value)
        value = shift = 0
    if shift:
        raise ValueError(f"Truncated base64 VLQ segment {segment!r}")
    return values
