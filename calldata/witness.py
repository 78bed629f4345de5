"""FRI witness layers.

In the flat witness every FRI layer is carried implicitly: a run is a count
followed by that many elements, and two consecutive runs (leaves, then
authentications) make up one layer. No other framing exists, so a witness
that does not decompose exactly into pairs of runs is malformed.
"""

from dataclasses import dataclass
from typing import Sequence

from calldata.errors import ParseError
from calldata.values import FlatSequence
from primitives.reader import FeltReader, ReaderExhausted


@dataclass
class FriLayer:
    """Decommitment of one FRI folding round.

    Attributes:
        leaves: Opened coset values, query-major
        authentications: Merkle authentication path elements
    """
    leaves: list[int]
    authentications: list[int]

    def flat(self) -> FlatSequence:
        """The layer as its two runs, exactly as it appears in the witness."""
        return [len(self.leaves), *self.leaves, len(self.authentications), *self.authentications]


def _read_run(reader: FeltReader, what: str) -> list[int]:
    try:
        return reader.read_span()
    except ReaderExhausted as e:
        raise ParseError(f"truncated {what} run", str(e)) from e


def group_witness_into_layers(elements: Sequence[int]) -> list[FriLayer]:
    """Split the FRI part of a flat witness into layers.

    Raises:
        ParseError: On a truncated run or a leaves run with no
            authentication run after it.
    """
    reader = FeltReader(elements)
    layers = []
    while not reader.at_end():
        start = reader.offset
        leaves = _read_run(reader, "leaves")
        if reader.at_end():
            raise ParseError(
                f"layer {len(layers) + 1} has no authentication run",
                f"offset {start}",
            )
        authentications = _read_run(reader, "authentications")
        layers.append(FriLayer(leaves, authentications))
    return layers
