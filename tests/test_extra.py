import base64
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from ctxserde.basic import SerializeString, UseSerde
from ctxserde.components import Context, SerdeError, SerializeWithContext
from ctxserde.extra import (
    SerializeBase64,
    SerializeHex,
    SerializeRfc3339Date,
    SerializeTimestamp,
)
from ctxserde.records import DeserializeExtend, DeserializeRecordFields, SerializeFields, SerializeIterator

UTC = timezone.utc
NEW_YEAR = datetime(2025, 1, 1, tzinfo=UTC)


@dataclass
class EncryptedMessage:
    message_id: int
    author_id: int
    date: datetime
    encrypted_data: bytes


@dataclass
class MessagesByTopic:
    encrypted_topic: bytes
    messages: list[EncryptedMessage]


@dataclass
class MessagesArchive:
    decryption_key: bytes
    messages_by_topics: list[MessagesByTopic]


RECORDS = (MessagesArchive, MessagesByTopic, EncryptedMessage)


def _archive():
    return MessagesArchive(
        decryption_key=b"top-secret",
        messages_by_topics=[
            MessagesByTopic(
                encrypted_topic=b"secret-deals",
                messages=[
                    EncryptedMessage(1, 1, NEW_YEAR, b"buy 1 free 1"),
                    EncryptedMessage(2, 8, NEW_YEAR, b"sales start tomorrow"),
                ],
            )
        ],
    )


def _app_a():
    serializers = {int: UseSerde(), str: UseSerde(), bytes: SerializeHex(),
                   datetime: SerializeRfc3339Date(), list: SerializeIterator()}
    serializers.update({record: SerializeFields() for record in RECORDS})
    deserializers = {int: UseSerde(), str: UseSerde(), bytes: SerializeHex(),
                     datetime: SerializeRfc3339Date(), list: DeserializeExtend()}
    deserializers.update({record: DeserializeRecordFields() for record in RECORDS})
    return Context(serializers=serializers, deserializers=deserializers)


def _app_b():
    serializers = {int: UseSerde(), str: UseSerde(), bytes: SerializeBase64(),
                   datetime: SerializeTimestamp(), list: SerializeIterator()}
    serializers.update({record: SerializeFields() for record in RECORDS})
    deserializers = {int: UseSerde(), str: UseSerde(), bytes: SerializeBase64(),
                     datetime: SerializeTimestamp(), list: DeserializeExtend()}
    deserializers.update({record: DeserializeRecordFields() for record in RECORDS})
    return Context(serializers=serializers, deserializers=deserializers)


@pytest.fixture
def ctx():
    return Context(
        serializers={str: SerializeString(), int: UseSerde()},
        deserializers={str: UseSerde(), int: UseSerde()},
    )


def test_nested_serialization_with_app_a():
    out = SerializeWithContext(_app_a(), MessagesArchive, _archive()).serialize()
    assert list(out) == ["decryption_key", "messages_by_topics"]
    assert out["decryption_key"] == "746f702d736563726574"
    topic = out["messages_by_topics"][0]
    assert bytes.fromhex(topic["encrypted_topic"]) == b"secret-deals"
    first, second = topic["messages"]
    assert first["message_id"] == 1 and first["author_id"] == 1
    assert second["message_id"] == 2 and second["author_id"] == 8
    assert first["date"] == "2025-01-01T00:00:00+00:00"
    assert bytes.fromhex(second["encrypted_data"]) == b"sales start tomorrow"


def test_nested_serialization_with_app_b():
    out = SerializeWithContext(_app_b(), MessagesArchive, _archive()).serialize()
    assert out["decryption_key"] == "dG9wLXNlY3JldA=="
    messages = out["messages_by_topics"][0]["messages"]
    assert [message["date"] for message in messages] == [1735689600, 1735689600]
    assert base64.b64decode(messages[0]["encrypted_data"]) == b"buy 1 free 1"


@pytest.mark.parametrize("make_app", [_app_a, _app_b])
def test_nested_round_trip(make_app):
    app = make_app()
    data = SerializeFields().serialize(app, MessagesArchive, _archive())
    restored = DeserializeRecordFields().deserialize(app, MessagesArchive, data)
    assert restored == _archive()


def test_hex_values(ctx):
    hexer = SerializeHex()
    assert hexer.serialize(ctx, bytes, b"\x01\x02\x03") == "010203"
    assert hexer.serialize(ctx, bytes, bytearray(b"\xde\xad\xbe\xef")) == "deadbeef"
    assert hexer.deserialize(ctx, bytes, "DEADBEEF") == b"\xde\xad\xbe\xef"
    assert hexer.deserialize(ctx, bytearray, "0102") == bytearray(b"\x01\x02")


@pytest.mark.parametrize("text", ["abc", "zz", "01 02"])
def test_hex_rejects_invalid(ctx, text):
    with pytest.raises(SerdeError):
        SerializeHex().deserialize(ctx, bytes, text)


def test_hex_rejects_non_string_data(ctx):
    with pytest.raises(SerdeError):
        SerializeHex().deserialize(ctx, bytes, 12)


def test_base64_values(ctx):
    coder = SerializeBase64()
    assert coder.serialize(ctx, bytes, b"top-secret") == "dG9wLXNlY3JldA=="
    assert coder.deserialize(ctx, bytes, "dG9wLXNlY3JldA==") == b"top-secret"


@pytest.mark.parametrize("text", ["dG9wLXNlY3JldA", "***", "dG9w LXNl"])
def test_base64_rejects_invalid(ctx, text):
    with pytest.raises(SerdeError):
        SerializeBase64().deserialize(ctx, bytes, text)


@pytest.mark.parametrize(
    "value, expected",
    [
        (NEW_YEAR, "2025-01-01T00:00:00+00:00"),
        (NEW_YEAR.replace(microsecond=500000), "2025-01-01T00:00:00.500+00:00"),
        (NEW_YEAR.replace(microsecond=123456), "2025-01-01T00:00:00.123456+00:00"),
        (datetime(2025, 1, 1, 2, tzinfo=timezone(timedelta(hours=2))), "2025-01-01T00:00:00+00:00"),
    ],
)
def test_rfc3339_format(ctx, value, expected):
    assert SerializeRfc3339Date().serialize(ctx, datetime, value) == expected


@pytest.mark.parametrize(
    "text",
    ["2025-01-01T00:00:00Z", "2025-01-01T02:00:00+02:00", "2024-12-31T23:00:00-01:00"],
)
def test_rfc3339_parse(ctx, text):
    parsed = SerializeRfc3339Date().deserialize(ctx, datetime, text)
    assert parsed == NEW_YEAR
    assert parsed.utcoffset() == timedelta(0)


def test_rfc3339_parse_fraction(ctx):
    parsed = SerializeRfc3339Date().deserialize(ctx, datetime, "2025-01-01T00:00:00.123456789Z")
    assert parsed == NEW_YEAR.replace(microsecond=123456)


@pytest.mark.parametrize(
    "text", ["not a date", "2025-13-01T00:00:00Z", "2025-01-01", "2025-01-01T00:00:00"]
)
def test_rfc3339_rejects_invalid(ctx, text):
    with pytest.raises(SerdeError):
        SerializeRfc3339Date().deserialize(ctx, datetime, text)


def test_rfc3339_rejects_naive(ctx):
    with pytest.raises(SerdeError):
        SerializeRfc3339Date().serialize(ctx, datetime, datetime(2025, 1, 1))


def test_timestamp_values(ctx):
    stamp = SerializeTimestamp()
    assert stamp.serialize(ctx, datetime, NEW_YEAR) == 1735689600
    assert stamp.deserialize(ctx, datetime, 1735689600) == NEW_YEAR
    assert stamp.deserialize(ctx, datetime, 0) == datetime(1970, 1, 1, tzinfo=UTC)


def test_timestamp_floors_fractions(ctx):
    before_epoch = datetime(1969, 12, 31, 23, 59, 59, 500000, tzinfo=UTC)
    assert SerializeTimestamp().serialize(ctx, datetime, before_epoch) == -1


def test_timestamp_rejects_out_of_range(ctx):
    with pytest.raises(SerdeError, match="invalid timestamp"):
        SerializeTimestamp().deserialize(ctx, datetime, 10**18)