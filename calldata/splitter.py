"""Verifier-replay splitter.

The constrained verifier cannot take a whole proof in one call, so the proof
is cut where the verifier's FRI round counter advances:
- initial: config, public input, unsent commitment and the witness up to
  (excluding) the first FRI layer
- stepN: constant state ++ variable state before round N ++ layer N
- final: constant state ++ variable state after the last round ++ the
  last-layer coefficients

The cut points come from a full replay of the verifier over the monolithic
calldata; an invalid proof is never split.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from calldata.errors import OutputDirectoryNotEmpty, VerificationFailed
from calldata.flatten import to_calldata_string
from calldata.fri_state import FriStateConstant, FriStateVariable
from calldata.layouts import Layout, resolve_layout
from calldata.monolith import monolith_calldata
from calldata.output import write_text_atomic
from calldata.proof_parser import parse
from calldata.values import FlatSequence
from calldata.verifier import ReplayVerifier, check_calldata, verify_calldata
from calldata.witness import group_witness_into_layers
from primitives.reader import FeltReader, ReaderExhausted

logger = logging.getLogger(__name__)


@dataclass
class SplitCalldataSet:
    """Calldata chunks for the split verifier, in submission order."""
    initial: FlatSequence
    steps: List[FlatSequence]
    final: FlatSequence

    def files(self) -> List[tuple[str, FlatSequence]]:
        """(file name, chunk) pairs: initial, step1..stepN, final."""
        named = [("initial", self.initial)]
        named.extend((f"step{i}", step) for i, step in enumerate(self.steps, start=1))
        named.append(("final", self.final))
        return named

    def total_elements(self) -> int:
        return sum(len(chunk) for _, chunk in self.files())


# --- Splitting ---

def split(proof_text: str, layout: "str | Layout") -> SplitCalldataSet:
    """Verify a proof and cut its calldata into one chunk per FRI round.

    Raises:
        UnsupportedLayout: Before anything else, if the layout has no verifier.
        ParseError: If the proof text is malformed.
        VerificationFailed: If the proof does not verify under the layout.
    """
    layout, _ = resolve_layout(layout)
    calldata = monolith_calldata(parse(proof_text))
    trace = verify_calldata(calldata, layout)

    constant = trace.constant.encode()
    steps = [
        constant + variable.encode() + witness
        for variable, witness in zip(trace.variables[:-1], trace.witnesses[:-1])
    ]
    final = constant + trace.variables[-1].encode() + trace.witnesses[-1]

    calldata_set = SplitCalldataSet(
        initial=calldata[:trace.initial_length],
        steps=steps,
        final=final,
    )
    logger.info(
        "Split proof into %d chunks (%d felts, monolith %d)",
        len(steps) + 2, calldata_set.total_elements(), len(calldata),
    )
    return calldata_set


def write_split_calldata(calldata_set: SplitCalldataSet, directory: Path) -> List[Path]:
    """Write each chunk to its own file in directory.

    The directory is created if absent.

    Raises:
        OutputDirectoryNotEmpty: If the directory already holds anything.
    """
    directory = Path(directory)
    if directory.exists() and any(directory.iterdir()):
        raise OutputDirectoryNotEmpty(str(directory))
    directory.mkdir(parents=True, exist_ok=True)

    paths = []
    for name, chunk in calldata_set.files():
        paths.append(write_text_atomic(directory / name, to_calldata_string(chunk)))
    logger.info("Wrote %d calldata files to %s", len(paths), directory)
    return paths


def split_proof_file(proof_path: Path, layout: "str | Layout", directory: Path) -> SplitCalldataSet:
    """Split a proof file into a calldata directory.

    Nothing is created unless the proof verifies.
    """
    calldata_set = split(Path(proof_path).read_text(encoding="utf-8"), layout)
    write_split_calldata(calldata_set, directory)
    return calldata_set


# --- Chunk Replay ---

def _resume(reader: FeltReader, chunk: str, constant: FriStateConstant,
            variable: FriStateVariable) -> FriStateVariable:
    """Read a chunk's state fragments and check them against the carried state."""
    try:
        chunk_constant = FriStateConstant.decode(reader)
        chunk_variable = FriStateVariable.decode(reader)
    except ReaderExhausted as e:
        raise VerificationFailed(f"{chunk}: state truncated ({e})") from e
    except ValueError as e:
        raise VerificationFailed(f"{chunk}: malformed state ({e})") from e

    if chunk_constant != constant:
        raise VerificationFailed(f"{chunk}: constant state mismatch")
    if chunk_variable != variable:
        raise VerificationFailed(f"{chunk}: variable state mismatch")
    return chunk_variable


def verify_split_calldata(calldata_set: SplitCalldataSet, layout: "str | Layout") -> None:
    """Replay the chunks in order, carrying state between them.

    Raises:
        VerificationFailed: If any chunk is rejected.
    """
    verifier = ReplayVerifier(layout)
    for name, chunk in calldata_set.files():
        check_calldata(chunk, name)

    reader = FeltReader(calldata_set.initial)
    constant, variable, _ = verifier.verify_initial(reader)
    if not reader.at_end():
        raise VerificationFailed(f"initial: {reader.remaining} trailing elements")
    if len(calldata_set.steps) != constant.n_layers:
        raise VerificationFailed(
            f"expected {constant.n_layers} step chunks, got {len(calldata_set.steps)}"
        )

    for i, chunk in enumerate(calldata_set.steps, start=1):
        reader = FeltReader(chunk)
        variable = _resume(reader, f"step{i}", constant, variable)
        layers = group_witness_into_layers(reader.read_rest())
        if len(layers) != 1:
            raise VerificationFailed(f"step{i}: expected one FRI layer, got {len(layers)}")
        variable = verifier.verify_step(constant, variable, layers[0])

    reader = FeltReader(calldata_set.final)
    variable = _resume(reader, "final", constant, variable)
    try:
        coefficients = reader.read_span()
    except ReaderExhausted as e:
        raise VerificationFailed(f"final: last layer truncated ({e})") from e
    if not reader.at_end():
        raise VerificationFailed(f"final: {reader.remaining} trailing elements")
    verifier.verify_final(constant, variable, coefficients)
    logger.info("Split calldata verified (%d steps)", len(calldata_set.steps))
