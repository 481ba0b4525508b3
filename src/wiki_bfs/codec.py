"""
Text encoding of vertex records.

A generation is stored as lines of ``id<TAB>EDGES|DISTANCE|COLOR`` where EDGES
is the neighbor ids joined by ``#``. Neither ``|`` nor ``#`` can occur in a
normalized id.
"""

from typing import Optional, Tuple

from wiki_bfs.exceptions import RecordCorruptionError
from wiki_bfs.types import Color, VertexRecord

FIELD_SEPARATOR = "|"
EDGE_SEPARATOR = "#"
KEY_SEPARATOR = "\t"


def encode_value(record: VertexRecord) -> str:
    """Serialize a record without its id, e.g. ``b#c|1|1``."""
    edges = EDGE_SEPARATOR.join(sorted(record.neighbors))
    return f"{edges}{FIELD_SEPARATOR}{record.distance}{FIELD_SEPARATOR}{int(record.color)}"


def decode_value(vertex_id: str, value: str) -> Optional[VertexRecord]:
    """Parse a serialized value back into a record.

    Returns None for malformed values (fewer than three fields). Trailing
    empty fields do not count, so ``a#|5|`` is malformed.

    Raises:
      RecordCorruptionError: If the distance or color field is present but is
        not an integer, or the color code is unknown.
    """
    fields = value.split(FIELD_SEPARATOR)
    while fields and fields[-1] == "":
        fields.pop()
    if len(fields) < 3:
        return None

    edges, distance_text, color_text = fields[0], fields[1], fields[2]
    try:
        distance = int(distance_text)
        color = Color(int(color_text))
    except ValueError as e:
        raise RecordCorruptionError(f"Corrupt record for '{vertex_id}': {value!r} ({e})") from e
    if distance < 0:
        raise RecordCorruptionError(f"Negative distance for '{vertex_id}': {value!r}")

    neighbors = frozenset(n for n in edges.split(EDGE_SEPARATOR) if n)
    return VertexRecord(id=vertex_id, neighbors=neighbors, distance=distance, color=color)


def encode_line(record: VertexRecord) -> str:
    return f"{record.id}{KEY_SEPARATOR}{encode_value(record)}"


def split_line(line: str) -> Tuple[str, str]:
    """Split a stored line into key and value. A line without a tab is all key."""
    line = line.rstrip("\n")
    key, _, value = line.partition(KEY_SEPARATOR)
    return key, value


def decode_line(line: str) -> Optional[VertexRecord]:
    key, value = split_line(line)
    return decode_value(key, value)
