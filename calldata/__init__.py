"""Calldata - Proof serialization for monolithic and split verifiers."""

from calldata.annotations import (
    merge_annotation_files,
    merge_annotations,
    read_annotation_lines,
)
from calldata.errors import (
    CalldataError,
    FieldElementEncodingError,
    MissingAnnotationFile,
    OutputDirectoryNotEmpty,
    ParseError,
    UnsupportedLayout,
    VerificationFailed,
)
from calldata.flatten import flatten, flatten_section, to_calldata_string
from calldata.fri_params import FriParameters, ceil_log2, compute_fri_parameters
from calldata.fri_state import FriStateConstant, FriStateVariable
from calldata.layouts import Layout, LayoutParams, resolve_layout
from calldata.monolith import CAIRO_VERSION, monolith_calldata, serialize_monolith, serialize_proof_file
from calldata.program_input import parse_program_input
from calldata.proof_parser import ProofSections, parse, parse_proof_file
from calldata.prover_settings import (
    ProverConfig,
    ProverParameters,
    format_air_public_input,
    get_prover_config,
    get_prover_parameters,
    prover_parameters_from_air_public_input,
    write_prover_files,
)
from calldata.splitter import SplitCalldataSet, split, split_proof_file, verify_split_calldata, write_split_calldata
from calldata.values import regroup
from calldata.verifier import ReplayTrace, ReplayVerifier, verify_calldata, verify_sections
from calldata.witness import FriLayer, group_witness_into_layers

__all__ = [
    # Errors
    "CalldataError",
    "ParseError",
    "FieldElementEncodingError",
    "VerificationFailed",
    "UnsupportedLayout",
    "MissingAnnotationFile",
    "OutputDirectoryNotEmpty",
    # Flattening
    "flatten",
    "flatten_section",
    "regroup",
    "to_calldata_string",
    # FRI parameters and prover documents
    "FriParameters",
    "ceil_log2",
    "compute_fri_parameters",
    "ProverParameters",
    "ProverConfig",
    "get_prover_parameters",
    "get_prover_config",
    "prover_parameters_from_air_public_input",
    "format_air_public_input",
    "write_prover_files",
    "parse_program_input",
    # Proof parsing and serialization
    "ProofSections",
    "parse",
    "parse_proof_file",
    "CAIRO_VERSION",
    "monolith_calldata",
    "serialize_monolith",
    "serialize_proof_file",
    # Replay verification and splitting
    "Layout",
    "LayoutParams",
    "resolve_layout",
    "FriLayer",
    "group_witness_into_layers",
    "FriStateConstant",
    "FriStateVariable",
    "ReplayTrace",
    "ReplayVerifier",
    "verify_calldata",
    "verify_sections",
    "SplitCalldataSet",
    "split",
    "split_proof_file",
    "write_split_calldata",
    "verify_split_calldata",
    # Annotations
    "merge_annotations",
    "merge_annotation_files",
    "read_annotation_lines",
]
