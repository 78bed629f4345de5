"""Prover parameter and prover config documents.

The external prover is driven by two JSON files: a parameter file (hashes,
field, FRI schedule) and a config file (task sizing). Both are built here as
dataclasses; the FRI schedule comes from compute_fri_parameters.
"""

import copy
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from calldata.fri_params import FriParameters, compute_fri_parameters
from calldata.output import write_text_atomic

DEFAULT_LOG_N_COSETS = 2


# --- Data Structures ---

@dataclass
class StatementParameters:
    page_hash: str = "pedersen"


@dataclass
class StarkParameters:
    fri: FriParameters
    log_n_cosets: int = DEFAULT_LOG_N_COSETS


@dataclass
class ProverParameters:
    """Prover parameter file (canonical schema for the supported prover version)."""
    stark: StarkParameters
    # declared before `field`, which shadows dataclasses.field in the class body
    statement: StatementParameters = field(default_factory=StatementParameters)
    field: str = "PrimeField0"
    channel_hash: str = "poseidon3"
    commitment_hash: str = "keccak256_masked160_lsb"
    n_verifier_friendly_commitment_layers: int = 9999
    pow_hash: str = "keccak256"
    use_extension_field: bool = False
    verifier_friendly_channel_updates: bool = True
    verifier_friendly_commitment_hash: str = "poseidon3"

    def to_json(self) -> dict[str, Any]:
        """Serialize in the key order the prover documents use."""
        return {
            "field": self.field,
            "channel_hash": self.channel_hash,
            "commitment_hash": self.commitment_hash,
            "n_verifier_friendly_commitment_layers": self.n_verifier_friendly_commitment_layers,
            "pow_hash": self.pow_hash,
            "statement": asdict(self.statement),
            "stark": asdict(self.stark),
            "use_extension_field": self.use_extension_field,
            "verifier_friendly_channel_updates": self.verifier_friendly_channel_updates,
            "verifier_friendly_commitment_hash": self.verifier_friendly_commitment_hash,
        }


@dataclass
class ProverConfig:
    """Prover config file. Out-of-memory Merkle layers are disabled."""
    constraint_polynomial_task_size: int = 256
    n_out_of_memory_merkle_layers: int = 0
    table_prover_n_tasks_per_segment: int = 32

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


# --- Builders ---

def get_prover_parameters(n_steps: int) -> ProverParameters:
    """Prover parameters sized for a trace of n_steps Cairo steps."""
    return ProverParameters(stark=StarkParameters(fri=compute_fri_parameters(n_steps)))


def get_prover_config() -> ProverConfig:
    return ProverConfig()


def prover_parameters_from_air_public_input(air_public_input: dict[str, Any]) -> ProverParameters:
    """Read n_steps from an AIR public input document and size the parameters.

    Raises:
        ValueError: If n_steps is missing or not a positive integer.
    """
    n_steps = air_public_input.get("n_steps")
    if isinstance(n_steps, bool) or not isinstance(n_steps, int) or n_steps < 1:
        raise ValueError(f"AIR public input has no valid n_steps: {n_steps!r}")
    return get_prover_parameters(n_steps)


def format_air_public_input(air_public_input: dict[str, Any]) -> dict[str, Any]:
    """Return a copy whose public_memory values all carry a 0x prefix."""
    formatted = copy.deepcopy(air_public_input)
    public_memory = formatted.get("public_memory")
    if not isinstance(public_memory, list):
        return formatted

    for item in public_memory:
        if not isinstance(item, dict):
            continue
        value = item.get("value")
        if isinstance(value, str) and not value.startswith("0x"):
            item["value"] = f"0x{value}"
    return formatted


def write_prover_files(n_steps: int, directory: Path) -> tuple[Path, Path]:
    """Write prover_parameters.json and prover_config.json into directory."""
    directory = Path(directory)
    parameters_path = directory / "prover_parameters.json"
    config_path = directory / "prover_config.json"

    write_text_atomic(parameters_path, json.dumps(get_prover_parameters(n_steps).to_json(), indent=2))
    write_text_atomic(config_path, json.dumps(get_prover_config().to_json(), indent=2))
    return parameters_path, config_path
