"""
Decoding of raw IPN request bodies.

PayPal posts notifications as application/x-www-form-urlencoded bodies in the
character set chosen in the merchant profile (windows-1252 by default, the
body names it in its ``charset`` field). The verification postback must echo
the message back byte for byte, so decoding here is deliberately narrower
than ``django.http.QueryDict``:

- field order is preserved
- names are kept exactly as sent, only values are percent-decoded
- values are decoded with the message charset and undecodable bytes are kept
  as surrogates, so ``quote_plus(value, encoding=message.encoding,
  errors="surrogateescape")`` gives the original bytes back
- a token that does not split into exactly one name and one value on ``=``
  is dropped (this also drops values that contain a literal ``=``)

Usage:
    from ipn.decoder import decode

    message = decode(request.body)
    message["txn_type"]      # "web_accept"
    message.raw_tokens       # "txn_type=web_accept;payment_status=Completed;"
"""

from __future__ import annotations

import codecs
from collections.abc import Iterator, Mapping
from urllib.parse import unquote_to_bytes

DEFAULT_ENCODING = "utf-8"

# Error handler used for every bytes <-> str conversion of message content.
ENCODING_ERRORS = "surrogateescape"

CHARSET_FIELD = b"charset"
TYPE_FIELD = "txn_type"


class IPNMessage(Mapping[str, str]):
    """
    Read-only, ordered view of a decoded notification.

    Attributes:
        encoding: Codec used to decode the values; the verifier re-encodes
            with the same codec
        raw_tokens: Accepted ``name=value`` tokens exactly as received, each
            followed by ``;``. Kept for the audit log only.
    """

    def __init__(
        self,
        fields: Mapping[str, str] | None = None,
        *,
        encoding: str = DEFAULT_ENCODING,
        raw_tokens: str = "",
    ):
        self._fields: dict[str, str] = dict(fields or {})
        self.encoding = encoding
        self.raw_tokens = raw_tokens

    def __getitem__(self, name: str) -> str:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"IPNMessage({self._fields!r}, encoding={self.encoding!r})"

    @property
    def txn_type(self) -> str | None:
        """Routing key of the message, None when the field is absent."""
        return self._fields.get(TYPE_FIELD)


def _split_pair(token: bytes) -> tuple[bytes, bytes] | None:
    parts = token.split(b"=")
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


# Bytes the form syntax relies on plus every byte value, for codec checks.
_SYNTAX = "&=+%;"
_ALL_BYTES = bytes(range(256))


def _lookup(charset: str) -> str:
    """
    Resolve a charset name to a codec usable for IPN bodies.

    The codec must leave the form syntax characters as single ASCII bytes
    and give every byte sequence back unchanged through surrogateescape.
    UTF-16/32, idna, ISO-2022 and bytes-to-bytes codecs fail one of these
    checks and fall back to UTF-8.
    """
    try:
        name = codecs.lookup(charset).name
        if _SYNTAX.encode(name) != _SYNTAX.encode("ascii"):
            return DEFAULT_ENCODING
        decoded = _ALL_BYTES.decode(name, ENCODING_ERRORS)
        if decoded.encode(name, ENCODING_ERRORS) != _ALL_BYTES:
            return DEFAULT_ENCODING
        return name
    except (LookupError, UnicodeError, TypeError, ValueError):
        return DEFAULT_ENCODING


def _to_bytes(raw: str, encoding: str) -> bytes:
    try:
        return raw.encode(encoding, ENCODING_ERRORS)
    except UnicodeEncodeError:
        return raw.encode(encoding, "replace")


def _resolve_encoding(pairs: list[tuple[bytes, bytes]]) -> str:
    """
    Pick the codec named by the body's charset field.

    Falls back to UTF-8 when the field is missing or names a codec that
    _lookup() rejects.
    """
    for name, value in pairs:
        if name != CHARSET_FIELD:
            continue
        return _lookup(unquote_to_bytes(value).decode("ascii", "ignore").strip())
    return DEFAULT_ENCODING


def _unquote_plus(value: bytes, encoding: str) -> str:
    return unquote_to_bytes(value.replace(b"+", b" ")).decode(encoding, ENCODING_ERRORS)


def _decode_fields(pairs: list[tuple[bytes, bytes]], encoding: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for name, value in pairs:
        fields[name.decode(encoding, ENCODING_ERRORS)] = _unquote_plus(value, encoding)
    return fields


def _printable(token: bytes) -> str:
    return token.decode("ascii", "backslashreplace")


def decode(raw: bytes | str, encoding: str | None = None) -> IPNMessage:
    """
    Decode a form-urlencoded IPN body into an IPNMessage.

    Never raises for malformed input: tokens without exactly one ``=`` are
    skipped and an unknown or unusable charset falls back to UTF-8.
    Repeated names keep the position of their first occurrence and the
    value of the last.

    Args:
        raw: The unparsed request body
        encoding: Codec for the values. When None, the body's own charset
            field decides.

    Returns:
        The decoded message
    """
    if encoding is not None:
        encoding = _lookup(encoding)
    if isinstance(raw, str):
        raw = _to_bytes(raw, encoding or DEFAULT_ENCODING)

    pairs = []
    for token in raw.split(b"&"):
        pair = _split_pair(token)
        if pair is not None:
            pairs.append(pair)

    if encoding is None:
        encoding = _resolve_encoding(pairs)

    try:
        fields = _decode_fields(pairs, encoding)
    except UnicodeError:
        encoding = DEFAULT_ENCODING
        fields = _decode_fields(pairs, encoding)

    raw_tokens = "".join(
        f"{_printable(name)}={_printable(value)};" for name, value in pairs
    )
    return IPNMessage(fields, encoding=encoding, raw_tokens=raw_tokens)
