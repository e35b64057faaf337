"""Transport codec for protocol frames."""

from __future__ import annotations

from typing import Any, Union

from .. import json
from ..protocol.message import Frame, ProtocolError


def encode_frame(frame: Union[Frame, dict]) -> str:
    """Return the JSON text for an outbound frame."""

    if isinstance(frame, Frame):
        frame = frame.to_dict()

    return json.text(frame)


def decode_frame(data: Union[str, bytes]) -> Any:
    """Return the decoded JSON value of an inbound text frame.

    Raises ProtocolError if the payload is not well-formed JSON.
    """

    if data in (b"", "", None):
        raise ProtocolError("empty frame", data)

    try:
        return json.loads(data)
    except json.DecodeError as exc:
        raise ProtocolError("malformed frame: " + str(exc), data) from exc
