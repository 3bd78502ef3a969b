"""Pluggable payload codecs.

The request pipeline never touches a serialization library directly. It goes
through a ``Codec``, which defaults to compact UTF-8 JSON.

Example:
    ```python
    import orjson

    from ghink_openapi import ClientConfig


    class OrjsonCodec:
        def encode(self, value):
            return orjson.dumps(value)

        def decode(self, data):
            return orjson.loads(data)


    config = ClientConfig(secret_id="id", secret_key="key", codec=OrjsonCodec())
    ```
"""

import json
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Codec(Protocol):
    """Encode values to bytes and decode bytes back to values.

    Implementations raise on failure; callers propagate those errors unchanged.
    """

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes) -> Any: ...


class JSONCodec:
    """Default codec backed by the standard library ``json`` module."""

    def encode(self, value: Any) -> bytes:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        return json.loads(data)

    def __repr__(self) -> str:
        return "JSONCodec()"
