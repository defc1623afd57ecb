"""Data units stored in client, coordinator and disk slots.

A block is identified by its content: two blocks holding equal payloads are
the same block as far as every cache and summary is concerned. Payloads are
str or bytes so that equality and identity agree.
"""

import hashlib
from dataclasses import dataclass
from typing import Union

Payload = Union[str, bytes]


def _payload_bytes(value) -> bytes:
    # tagged so "x" and b"x", which compare unequal, hash apart
    if isinstance(value, str):
        return b"s:" + value.encode("utf-8")
    if isinstance(value, bytes):
        return b"b:" + value
    raise TypeError(f"block payload must be str or bytes, got {type(value).__name__}")


def content_id(value) -> int:
    """Return a deterministic content identity for a payload.

    Blocks are passed through unchanged so callers can hand either a raw
    payload or a Block. The digest is stable across interpreter runs,
    unlike the builtin hash() of a str.
    """
    if isinstance(value, Block):
        value = value.data
    digest = hashlib.sha1(_payload_bytes(value)).digest()
    return int.from_bytes(digest[:8], "big")


@dataclass(frozen=True)
class Block:
    """An immutable named payload.

    Attributes:
        data: The payload, usually a short string such as ``"block-17"``
    """
    data: Payload

    def __post_init__(self):
        _payload_bytes(self.data)

    @property
    def identity(self) -> int:
        return content_id(self.data)

    def __repr__(self) -> str:
        return f"Block({self.data!r})"
