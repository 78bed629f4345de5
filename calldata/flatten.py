"""Field-element flattener.

Turns Value trees into canonical flat felt sequences:
- a Scalar emits one element
- an Array emits its length, then the flattening of each child in order

A section (top-level array of a proof) is flattened as the concatenation of
its children; its own length is positional and never emitted.
"""

from calldata.errors import FieldElementEncodingError
from calldata.values import FlatSequence, Value, is_array, is_scalar
from primitives.field import check_felt, parse_felt


def encode_scalar(value: object) -> int:
    """Encode one scalar as a felt.

    Strings are parsed as unsigned decimal or 0x-hex; ints must already be
    canonical felts.

    Raises:
        FieldElementEncodingError: For non-numeric, negative or out-of-field
            scalars and for disallowed types (bool, None, float, dict).
    """
    if not is_scalar(value):
        raise FieldElementEncodingError(
            f"invalid type: {type(value).__name__}", value
        )
    try:
        if isinstance(value, str):
            return parse_felt(value)
        return check_felt(value)
    except ValueError as e:
        raise FieldElementEncodingError(str(e), value) from e


def flatten(tree: Value) -> FlatSequence:
    """Flatten a Value tree (arrays length-prefixed)."""
    out: FlatSequence = []
    _flatten_into(tree, out)
    return out


def flatten_section(section: Value) -> FlatSequence:
    """Flatten a top-level section without its own length prefix."""
    if not is_array(section):
        raise FieldElementEncodingError(
            f"section must be an array, got {type(section).__name__}", section
        )
    out: FlatSequence = []
    for child in section:
        _flatten_into(child, out)
    return out


def _flatten_into(tree: Value, out: FlatSequence) -> None:
    if is_array(tree):
        out.append(len(tree))
        for child in tree:
            _flatten_into(child, out)
    else:
        out.append(encode_scalar(tree))


def to_calldata_string(elements: FlatSequence) -> str:
    """Join felts' canonical decimal forms with single spaces."""
    return " ".join(str(e) for e in elements)
