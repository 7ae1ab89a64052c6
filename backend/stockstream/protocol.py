"""Wire protocol: JSON messages tagged by a ``type`` field.

Client -> server:
    {"type": "subscribe", "stocks": ["AAPL", ...]}

Server -> client:
    {"type": "update", "data": {"AAPL": 190.5, ...}}
    {"error": "<message>"}

All inbound parsing goes through ``parse_client_message`` or
``parse_server_message``. Anything that does not match a known schema raises
ProtocolError; a well-formed object with an unrecognized ``type`` comes back
as UnknownMessage so the caller can log and ignore it.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

PARSE_ERROR = "Failed to parse message"


class ProtocolError(ValueError):
    """An inbound message could not be parsed or failed validation."""


class SubscribeMessage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: Literal["subscribe"] = "subscribe"
    stocks: list[str]


class UpdateMessage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: Literal["update"] = "update"
    data: dict[str, float]


class ErrorMessage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    error: str


@dataclass(frozen=True)
class UnknownMessage:
    """A well-formed message whose ``type`` this side does not handle."""

    type: str
    payload: dict[str, Any] = field(default_factory=dict)


ClientMessage = SubscribeMessage | UnknownMessage
ServerMessage = UpdateMessage | ErrorMessage | UnknownMessage


def _decode(raw: str | bytes) -> dict[str, Any]:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise ProtocolError(PARSE_ERROR) from e
    if not isinstance(payload, dict):
        raise ProtocolError(PARSE_ERROR)
    return payload


def _validate(model: type[BaseModel], payload: dict[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<root>" for err in e.errors())
        raise ProtocolError(f"Invalid {payload.get('type') or 'error'} message: bad field(s) {fields}") from e


def parse_client_message(raw: str | bytes) -> ClientMessage:
    """Parse a message received by the server."""
    payload = _decode(raw)
    msg_type = payload.get("type")
    if not isinstance(msg_type, str):
        raise ProtocolError("Message is missing a string 'type' field")
    if msg_type == "subscribe":
        return _validate(SubscribeMessage, payload)
    return UnknownMessage(type=msg_type, payload=payload)


def parse_server_message(raw: str | bytes) -> ServerMessage:
    """Parse a message received by the client."""
    payload = _decode(raw)
    msg_type = payload.get("type")
    if msg_type is None and "error" in payload:
        return _validate(ErrorMessage, payload)
    if not isinstance(msg_type, str):
        raise ProtocolError("Message is missing a string 'type' field")
    if msg_type == "update":
        return _validate(UpdateMessage, payload)
    return UnknownMessage(type=msg_type, payload=payload)


def encode_subscribe(symbols: Iterable[str]) -> str:
    return json.dumps({"type": "subscribe", "stocks": sorted(symbols)})


def encode_update(prices: Mapping[str, float]) -> str:
    return json.dumps({"type": "update", "data": dict(prices)})


def encode_error(message: str) -> str:
    return json.dumps({"error": message})
