"""Value trees: the JSON-native form of proof sections.

A Value is either a Scalar (decimal/hex string or non-negative int) or an
Array (list of Values). Arrays nest arbitrarily. Anything else (bool, None,
float, dict) is a structural error at encoding time.
"""

from typing import Sequence, Union

from calldata.errors import ParseError
from primitives.reader import FeltReader, ReaderExhausted

# --- Type Aliases ---

Scalar = Union[str, int]
Value = Union[Scalar, list["Value"]]
FlatSequence = list[int]


def is_scalar(value: object) -> bool:
    # bool is an int subclass but never a valid scalar
    return isinstance(value, str) or (isinstance(value, int) and not isinstance(value, bool))


def is_array(value: object) -> bool:
    return isinstance(value, list)


def shape_of(value: Value) -> object:
    """Shape of a tree: None for a scalar, list of child shapes for an array."""
    if is_array(value):
        return [shape_of(child) for child in value]
    return None


def regroup(elements: Sequence[int], template: Value) -> Value:
    """Rebuild a flattened tree, reading array lengths from the stream.

    The template only tells scalars from arrays; every array length is taken
    from the recorded count and must agree with the template.

    Raises:
        ParseError: If the stream does not match the template or has leftovers.
    """
    reader = FeltReader(elements)
    try:
        out = _regroup(reader, template)
    except ReaderExhausted as e:
        raise ParseError("flat sequence truncated", str(e)) from e
    if not reader.at_end():
        raise ParseError("trailing elements after regroup", str(reader.read_rest()[:8]))
    return out


def _regroup(reader: FeltReader, template: Value) -> Value:
    if not is_array(template):
        return reader.read()
    count = reader.read()
    if count != len(template):
        raise ParseError(
            f"array length mismatch at offset {reader.offset - 1}",
            f"recorded {count}, expected {len(template)}",
        )
    return [_regroup(reader, child) for child in template]
