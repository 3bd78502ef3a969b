"""Response envelope parsing and call results.

Every upstream response body is wrapped as::

    {"code": 200, "msg": "ok", "data": {...}}

``parse_envelope`` unwraps it into a ``Result`` whose ``body`` holds only the
re-encoded ``data`` member, so typed callers can decode the business payload
without knowing the envelope shape.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from ghink_openapi.codec import Codec, JSONCodec
from ghink_openapi.const import CODE_OK
from ghink_openapi.errors.exceptions import EnvelopeDecodeError


@dataclass
class Envelope:
    """Decoded ``{code, msg, data}`` wrapper."""

    code: int = 0
    msg: str = ""
    data: Any = None

    @classmethod
    def decode(cls, body: bytes, codec: Codec) -> "Envelope":
        """Decode a response body into an envelope.

        Missing members take their zero value. Members of the wrong type are
        rejected.

        Args:
            body: Raw response body
            codec: Codec used to decode the body

        Returns:
            Decoded envelope

        Raises:
            EnvelopeDecodeError: If the body cannot be decoded or is not an
                object with an integer ``code`` and string ``msg``.
        """
        try:
            raw = codec.decode(body)
        except Exception as e:
            raise EnvelopeDecodeError(f"failed to decode response envelope: {e}") from e

        if not isinstance(raw, dict):
            raise EnvelopeDecodeError(f"response envelope must be an object, got {type(raw).__name__}")

        code = raw.get("code", 0)
        # bool is an int subclass but never a valid code
        if isinstance(code, bool) or not isinstance(code, int):
            raise EnvelopeDecodeError(f"envelope 'code' must be an integer, got {code!r}")

        msg = raw.get("msg", "")
        if msg is None:
            msg = ""
        if not isinstance(msg, str):
            raise EnvelopeDecodeError(f"envelope 'msg' must be a string, got {msg!r}")

        return cls(code=code, msg=msg, data=raw.get("data"))


@dataclass
class Result:
    """Outcome of one call through the request pipeline.

    Either ``err`` is set and the other fields carry nothing, or ``err`` is
    ``None`` and ``code``/``msg``/``body`` describe the upstream answer.
    Check ``err`` (or ``ok``) before trusting the rest.
    """

    code: int = 0
    msg: str = ""
    body: bytes = b""
    err: Exception | None = None
    codec: Codec = field(default_factory=JSONCodec, repr=False, compare=False)

    @classmethod
    def failure(cls, err: Exception, codec: Codec | None = None) -> "Result":
        return cls(err=err, codec=codec or JSONCodec())

    @property
    def ok(self) -> bool:
        """True when the call succeeded and the upstream answered with code 200."""
        return self.err is None and self.code == CODE_OK

    def unmarshal(self, model: type | None = None) -> Any:
        """Decode ``body`` with the client's codec.

        Args:
            model: Optional class built as ``model(**value)`` from the decoded
                object, e.g. a dataclass describing the payload. Members the
                dataclass does not declare are ignored, and a null ``data``
                builds the model from its defaults.

        Returns:
            The decoded value, or a ``model`` instance.

        Raises:
            TypeError: If the decoded value is not an object, or lacks a
                member the model requires.
        """
        value = self.codec.decode(self.body)
        if model is None:
            return value
        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise TypeError(f"cannot build {model.__name__} from {type(value).__name__}")
        if dataclasses.is_dataclass(model):
            names = {f.name for f in dataclasses.fields(model)}
            value = {name: member for name, member in value.items() if name in names}
        return model(**value)


def parse_envelope(body: bytes, codec: Codec) -> Result:
    """Unwrap an envelope into a ``Result``.

    Decode failures and failures re-encoding ``data`` are reported through
    ``Result.err`` rather than raised.
    """
    try:
        envelope = Envelope.decode(body, codec)
    except EnvelopeDecodeError as e:
        return Result.failure(e, codec)

    try:
        data_body = codec.encode(envelope.data)
    except Exception as e:
        return Result.failure(EnvelopeDecodeError(f"failed to re-encode envelope data: {e}"), codec)

    return Result(code=envelope.code, msg=envelope.msg, body=data_body, codec=codec)
