"""
Record codec shared by intermediate and output files.

Records are written back to back as JSON objects shaped
``{"Key": ..., "Value": ...}``, one per line, with no length prefixes.
Readers pull them off one at a time: ask ``more()``, then ``decode()``.
"""

import json
from typing import Iterable, Iterator, List, NamedTuple, TextIO


class KeyValue(NamedTuple):
    """A single key/value record. Both fields are text."""
    Key: str
    Value: str


class RecordEncodeError(TypeError):
    """A record could not be encoded (non-text key or value)."""


class RecordDecodeError(ValueError):
    """The stream holds something other than a well-formed record."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} (at offset {position})")
        self.position = position


_WHITESPACE = ' \t\n\r'


def encode_record(record: KeyValue) -> str:
    """Encode one record as a JSON line."""
    key, value = record
    if not isinstance(key, str) or not isinstance(value, str):
        raise RecordEncodeError(
            f"Key and Value must be str, got {type(key).__name__} and {type(value).__name__}"
        )
    try:
        key.encode('utf-8')
        value.encode('utf-8')
    except UnicodeEncodeError as e:
        raise RecordEncodeError(f"Record is not valid UTF-8 text: {e}") from e
    return json.dumps({'Key': key, 'Value': value}, ensure_ascii=False, separators=(',', ':')) + '\n'


def write_records(fp: TextIO, records: Iterable[KeyValue]) -> int:
    """Append each record to an open text stream; returns how many were written."""
    count = 0
    for record in records:
        fp.write(encode_record(record))
        count += 1
    return count


class RecordStream:
    """Streaming reader over a blob of concatenated records."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._decoder = json.JSONDecoder()

    def _skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def more(self) -> bool:
        """Is there another record left in the stream?"""
        self._skip_whitespace()
        return self.pos < len(self.text)

    def decode(self) -> KeyValue:
        """Decode the next record."""
        self._skip_whitespace()
        start = self.pos
        try:
            obj, end = self._decoder.raw_decode(self.text, start)
        except json.JSONDecodeError as e:
            raise RecordDecodeError(f"Malformed record: {e.msg}", e.pos) from e

        if not isinstance(obj, dict):
            raise RecordDecodeError(f"Expected a JSON object, got {type(obj).__name__}", start)
        if 'Key' not in obj or 'Value' not in obj:
            raise RecordDecodeError("Record is missing Key or Value", start)
        key, value = obj['Key'], obj['Value']
        if not isinstance(key, str) or not isinstance(value, str):
            raise RecordDecodeError("Record Key and Value must be strings", start)

        self.pos = end
        return KeyValue(key, value)

    def __iter__(self) -> Iterator[KeyValue]:
        while self.more():
            yield self.decode()


def decode_records(text: str) -> List[KeyValue]:
    """Decode every record in a blob."""
    return list(RecordStream(text))
