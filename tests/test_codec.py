"""
Tests for the record codec used by intermediate and output files.
"""

import io

import pytest

from mrshuffle.utils.codec import (
    KeyValue,
    RecordDecodeError,
    RecordEncodeError,
    RecordStream,
    decode_records,
    encode_record,
    write_records,
)


def test_encode_record_shape():
    """Records are compact JSON objects with Key and Value fields, one per line."""
    assert encode_record(KeyValue("a", "1")) == '{"Key":"a","Value":"1"}\n'


def test_round_trip_preserves_order_and_content():
    records = [
        KeyValue("a", "1"),
        KeyValue("line\nbreak", 'quote " and \\ backslash'),
        KeyValue("ключ", "значение"),
        KeyValue("", ""),
        KeyValue("a", "2"),
    ]
    buf = io.StringIO()
    assert write_records(buf, records) == len(records)

    decoded = decode_records(buf.getvalue())
    assert decoded == records, f"Expected {records}, got {decoded}"


def test_stream_more_then_decode():
    stream = RecordStream('{"Key":"x","Value":"1"}  \n\n{"Key": "y", "Value": "2"}')

    assert stream.more()
    assert stream.decode() == KeyValue("x", "1")
    assert stream.more()
    assert stream.decode() == KeyValue("y", "2")
    assert not stream.more()


def test_back_to_back_objects_without_separator():
    assert decode_records('{"Key":"x","Value":"1"}{"Key":"y","Value":"2"}') == [
        KeyValue("x", "1"), KeyValue("y", "2")
    ]


def test_empty_and_whitespace_blobs():
    assert decode_records("") == []
    assert decode_records(" \n\t ") == []


def test_extra_fields_are_ignored():
    assert decode_records('{"Key":"k","Value":"v","Other":3}') == [KeyValue("k", "v")]


@pytest.mark.parametrize("blob", [
    '{"Key":"a","Value":"1"',
    '{"Key":"a","Value":"1"} garbage',
    '["a", "1"]',
    '{"Key":"a"}',
    '{"Key":"a","Value":1}',
    '{"Key":null,"Value":"1"}',
])
def test_malformed_records_raise(blob):
    with pytest.raises(RecordDecodeError):
        decode_records(blob)


def test_decode_error_reports_position():
    with pytest.raises(RecordDecodeError) as excinfo:
        decode_records('{"Key":"a","Value":"1"}\n[1]')
    assert excinfo.value.position == 24


def test_encode_rejects_non_text():
    with pytest.raises(RecordEncodeError):
        encode_record(KeyValue("a", 1))
    with pytest.raises(RecordEncodeError):
        encode_record(KeyValue(None, "1"))


def test_encode_rejects_text_that_is_not_utf8():
    with pytest.raises(RecordEncodeError):
        encode_record(KeyValue("\ud800", "1"))
    with pytest.raises(RecordEncodeError):
        encode_record(KeyValue("a", "\udc80"))
