"""
Link data file codec.

Only the forward index (alias -> Entry) is written. The file is a JSON
object keyed by alias:

    {
      "abcd": {
        "link": "https://example.com",
        "metadata": {"used": 3, "last_used": "...", "created": "..."}
      }
    }

Timestamps are ISO-8601 with microseconds, so they round-trip exactly.
"""

from pathlib import Path
from typing import Dict, Union

from pydantic import TypeAdapter, ValidationError

from shortlink_app.errors import StoreIOError, StoreParseError
from shortlink_app.models.entry import Entry

ForwardIndex = Dict[str, Entry]

_forward_adapter = TypeAdapter(ForwardIndex)


def encode(forward: ForwardIndex) -> bytes:
    """Serialize the forward index to JSON bytes"""
    return _forward_adapter.dump_json(forward, indent=2)


def decode(data: Union[str, bytes], path: Union[str, Path] = "<memory>") -> ForwardIndex:
    """
    Parse JSON into a forward index.

    Raises:
        StoreParseError: data is not a valid link table
    """
    try:
        return _forward_adapter.validate_json(data)
    except ValidationError as e:
        raise StoreParseError(path, f"Could not parse link data: {e.error_count()} error(s)") from e


def read(path: Union[str, Path]) -> ForwardIndex:
    """
    Read the forward index from a file.

    Raises:
        StoreIOError: file could not be read
        StoreParseError: file contents are invalid
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise StoreIOError(path, f"Could not load links: {e}") from e

    return decode(data, path)


def write(path: Union[str, Path], forward: ForwardIndex) -> None:
    """
    Write the forward index to a file.

    Writes to a temp file first and then replaces the target,
    so a failed write never leaves a truncated link table behind.

    Raises:
        StoreIOError: file could not be written
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_bytes(encode(forward))
        tmp_path.replace(path)
    except OSError as e:
        raise StoreIOError(path, f"Could not write to file: {e}") from e
