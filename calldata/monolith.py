"""Monolithic calldata serialization.

The unconstrained verifier takes the whole proof in one call:
    config ++ public_input ++ unsent_commitment ++ witness ++ [CAIRO_VERSION]
as space separated decimal felts.
"""

import logging
from pathlib import Path

from calldata.flatten import to_calldata_string
from calldata.output import write_text_atomic
from calldata.proof_parser import ProofSections, parse_proof_file
from calldata.values import FlatSequence

logger = logging.getLogger(__name__)

# Version tag appended to monolithic calldata
CAIRO_VERSION = 1


def monolith_calldata(sections: ProofSections) -> FlatSequence:
    """Flatten the four sections in order and append the version tag."""
    calldata = sections.flatten().concat()
    calldata.append(CAIRO_VERSION)
    return calldata


def serialize_monolith(sections: ProofSections) -> str:
    return to_calldata_string(monolith_calldata(sections))


def serialize_proof_file(proof_path: Path, output_path: Path) -> int:
    """Serialize a proof file to a calldata file. Returns the element count."""
    calldata = monolith_calldata(parse_proof_file(proof_path))
    logger.info("proof size: %d felts", len(calldata) - 1)
    write_text_atomic(Path(output_path), to_calldata_string(calldata))
    return len(calldata)
