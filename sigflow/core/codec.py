"""Base64 transcoding and PEM-style armor framing for exchanged text."""

from __future__ import annotations

import base64
import binascii
import re

from sigflow.errors import DecodeError

DEFAULT_LINE_WIDTH = 64

_TAG_FRAGMENT = re.compile(r"-----.*-----")
_WHITESPACE = re.compile(r"\s+")
_BEGIN_LINE = re.compile(r"^-----BEGIN ([^-]+)-----$")
_END_LINE = re.compile(r"^-----END ([^-]+)-----$")


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Decode standard padded Base64, ignoring any whitespace in ``text``."""
    compact = _WHITESPACE.sub("", text)
    try:
        return base64.b64decode(compact.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise DecodeError(f"invalid base64 text: {exc}") from exc


def armor(text: str, tag: str, line_width: int = DEFAULT_LINE_WIDTH) -> str:
    """Wrap Base64 ``text`` in BEGIN/END lines, hard-wrapping the body."""
    if line_width <= 0:
        raise ValueError("line_width must be positive")
    body = [text[start : start + line_width] for start in range(0, len(text), line_width)]
    return "\n".join([f"-----BEGIN {tag}-----", *body, f"-----END {tag}-----"])


def unarmor(armored: str, *, strict: bool = False) -> str:
    """Strip tag lines and whitespace, returning the bare Base64 body.

    The default mode accepts any tag value, mismatched or missing BEGIN/END
    lines and multiple blocks; everything between ``-----`` markers on a line
    is discarded. ``strict`` requires a single well-formed block instead.
    """
    if strict:
        _check_single_block(armored)
    return _WHITESPACE.sub("", _TAG_FRAGMENT.sub("", armored))


def _check_single_block(armored: str) -> None:
    lines = [line.strip() for line in armored.splitlines() if line.strip()]
    if len(lines) < 2:
        raise DecodeError("armored text must contain BEGIN and END lines")

    begin = _BEGIN_LINE.match(lines[0])
    if begin is None:
        raise DecodeError("armored text must start with a BEGIN line")
    end = _END_LINE.match(lines[-1])
    if end is None:
        raise DecodeError("armored text must end with an END line")
    if begin.group(1) != end.group(1):
        raise DecodeError(
            f"BEGIN tag {begin.group(1)!r} does not match END tag {end.group(1)!r}",
        )
    if any("-----" in line for line in lines[1:-1]):
        raise DecodeError("armored text must contain exactly one block")


__all__ = [
    "DEFAULT_LINE_WIDTH",
    "armor",
    "decode_base64",
    "encode_base64",
    "unarmor",
]
