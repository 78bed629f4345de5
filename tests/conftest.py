"""
Pytest configuration for stark-calldata tests.

Provides proofs built by tests/proof_builder.py. The default proof uses the
recursive layout with FRI steps [0, 2, 2, 1], i.e. three FRI rounds.
"""

import copy
import sys
from pathlib import Path

import pytest

# Add the repository root to the path so absolute imports work
# (tests/ is inside the root, so parent is the root)
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from tests.proof_builder import build_proof  # noqa: E402

_THREE_ROUND_PROOF = build_proof()


@pytest.fixture
def proof_sections() -> dict:
    """A fresh copy of the three-round proof, safe to tamper with."""
    return copy.deepcopy(_THREE_ROUND_PROOF)
