"""Proof-text parser.

The prover's transcript is converted by an external, versioned parser into a
JSON document with four sections. This module only relies on that stable
interface: an object holding `config`, `public_input`, `unsent_commitment`
and `witness`, each a JSON array. Other keys are ignored.
"""

import json
from dataclasses import dataclass
from pathlib import Path

from calldata.errors import ParseError
from calldata.flatten import flatten_section
from calldata.values import FlatSequence, Value, is_array

SECTION_NAMES = ("config", "public_input", "unsent_commitment", "witness")
FRAGMENT_RADIUS = 24


# --- Data Structures ---

@dataclass
class ProofSections:
    """The four Value trees of a proof, in calldata order."""
    config: list[Value]
    public_input: list[Value]
    unsent_commitment: list[Value]
    witness: list[Value]

    def flatten(self) -> "FlatSections":
        return FlatSections(
            config=flatten_section(self.config),
            public_input=flatten_section(self.public_input),
            unsent_commitment=flatten_section(self.unsent_commitment),
            witness=flatten_section(self.witness),
        )


@dataclass
class FlatSections:
    """Flattened sections."""
    config: FlatSequence
    public_input: FlatSequence
    unsent_commitment: FlatSequence
    witness: FlatSequence

    def head(self) -> FlatSequence:
        """config ++ public_input ++ unsent_commitment."""
        return self.config + self.public_input + self.unsent_commitment

    def concat(self) -> FlatSequence:
        return self.head() + self.witness


# --- Parsing ---

def _fragment(text: str, pos: int) -> str:
    return text[max(0, pos - FRAGMENT_RADIUS):pos + FRAGMENT_RADIUS]


def parse(text: str) -> ProofSections:
    """Parse proof text into its four sections.

    Raises:
        ParseError: On malformed JSON, a missing section, or a section that
            is not an array. The error carries the offending fragment.
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"malformed proof text ({e.msg})", _fragment(text, e.pos)) from e
    except ValueError as e:
        # e.g. an integer literal past the int conversion digit limit
        raise ParseError(f"malformed proof text ({e})", text[:2 * FRAGMENT_RADIUS]) from e

    if not isinstance(doc, dict):
        raise ParseError("proof text must be a JSON object", text[:2 * FRAGMENT_RADIUS])

    sections = {}
    for name in SECTION_NAMES:
        if name not in doc:
            raise ParseError("missing proof section", name)
        section = doc[name]
        if not is_array(section):
            raise ParseError(f"section {name} must be an array", json.dumps(section)[:2 * FRAGMENT_RADIUS])
        sections[name] = section

    return ProofSections(**sections)


def parse_proof_file(path: Path) -> ProofSections:
    """Read and parse a proof file."""
    return parse(Path(path).read_text(encoding="utf-8"))
