"""Providers that encode bytes as hex or base64 and dates as RFC 3339 or timestamps."""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from .basic import _BYTES_LIKE, _build_from_bytes, _fallible
from .components import Context, SerdeError, ValueDeserializer, ValueSerializer

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt ]"
    r"([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?"
    r"(?:([Zz])|([+-])([0-9]{2}):([0-9]{2}))"
)


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, _BYTES_LIKE):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    raise SerdeError(f"expected bytes, found {type(value).__name__}")


def _as_utc(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise SerdeError(f"expected a datetime, found {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise SerdeError("expected a timezone-aware datetime")
    return value.astimezone(timezone.utc)


def _format_rfc3339(value: datetime) -> str:
    moment = _as_utc(value)
    micro = moment.microsecond
    if micro == 0:
        fraction = ""
    elif micro % 1000 == 0:
        fraction = f".{micro // 1000:03d}"
    else:
        fraction = f".{micro:06d}"
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        f"{fraction}+00:00"
    )


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise SerdeError(f"invalid RFC 3339 date: {text!r}")
    year, month, day, hour, minute, second, fraction, zulu, sign, off_h, off_m = (
        match.groups()
    )
    micro = int(fraction[:6].ljust(6, "0")) if fraction else 0
    try:
        if zulu:
            tz = timezone.utc
        else:
            hours, minutes = int(off_h), int(off_m)
            if minutes >= 60:
                raise ValueError("offset minutes out of range")
            offset = timedelta(hours=hours, minutes=minutes)
            tz = timezone(-offset if sign == "-" else offset)
        moment = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), micro,
            tzinfo=tz,
        )
    except ValueError as exc:
        raise SerdeError(f"invalid RFC 3339 date: {exc}") from exc
    return moment.astimezone(timezone.utc)


class SerializeHex(ValueSerializer, ValueDeserializer):
    """Encodes bytes as a lower-case hex string."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        return context.serialize(str, _as_bytes(value).hex())

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        text = context.deserialize(str, data)
        try:
            raw = binascii.unhexlify(text)
        except (binascii.Error, ValueError) as exc:
            raise SerdeError(f"invalid hex string: {exc}") from exc
        return _fallible(lambda payload: _build_from_bytes(value_type, payload), raw)


class SerializeBase64(ValueSerializer, ValueDeserializer):
    """Encodes bytes as padded base64 with the standard alphabet."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        encoded = base64.b64encode(_as_bytes(value)).decode("ascii")
        return context.serialize(str, encoded)

    def deserialize(self, context: Context, value_type: Any, data: Any) -> bytes:
        text = context.deserialize(str, data)
        try:
            return base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SerdeError(f"invalid base64 string: {exc}") from exc


class SerializeRfc3339Date(ValueSerializer, ValueDeserializer):
    """Encodes a UTC datetime as an RFC 3339 string."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        return context.serialize(str, _format_rfc3339(value))

    def deserialize(self, context: Context, value_type: Any, data: Any) -> datetime:
        return _parse_rfc3339(context.deserialize(str, data))


class SerializeTimestamp(ValueSerializer, ValueDeserializer):
    """Encodes a UTC datetime as whole seconds since the Unix epoch."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        seconds = (_as_utc(value) - _EPOCH) // timedelta(seconds=1)
        return context.serialize(int, seconds)

    def deserialize(self, context: Context, value_type: Any, data: Any) -> datetime:
        seconds = context.deserialize(int, data)
        try:
            return _EPOCH + timedelta(seconds=seconds)
        except OverflowError:
            raise SerdeError("invalid timestamp") from None