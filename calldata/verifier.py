"""Replay verification of serialized proofs.

This module re-executes the verifier over flat calldata, exactly as an
on-chain verifier consumes it. It is the reference both serialization modes
are checked against: the monolithic calldata and the split chunk sequence
must reach the same accept/reject decision.

Verification consists of three phases:
1. Initial - read config, public input and commitments; check trace
   decommitments; replay the Fiat-Shamir channel to derive the FRI schedule
   (folding challenges, query indices) and check proof of work
2. FRI steps - one per layer: check the layer decommitment and fold every
   query's value by the layer's step size
3. Final - check the folded values against the last-layer polynomial

Between phases the verifier only carries a FriStateConstant and a
FriStateVariable. A replay of the monolithic calldata records every such
state in a ReplayTrace, which the splitter cuts into chunks.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from calldata.errors import VerificationFailed
from calldata.flatten import flatten
from calldata.fri_params import LOG_CPU_COMPONENT_HEIGHT, MAX_FRI_STEP
from calldata.fri_state import FriStateConstant, FriStateVariable
from calldata.layouts import Layout, LayoutParams, resolve_layout
from calldata.monolith import CAIRO_VERSION, monolith_calldata
from calldata.proof_parser import ProofSections
from calldata.values import FlatSequence
from calldata.witness import FriLayer, group_witness_into_layers
from primitives.channel import Channel
from primitives.field import check_felt, decode_short_string, evaluate_polynomial
from primitives.hashing import commitment_hash, hash_felts
from primitives.reader import FeltReader, ReaderExhausted

logger = logging.getLogger(__name__)

MAX_FRI_LAYERS = 15
MAX_LOG_N_COSETS = 4
MAX_LOG_LAST_LAYER_DEGREE_BOUND = 15
MAX_PROOF_OF_WORK_BITS = 50
NONCE_BOUND = 1 << 64


# --- Proof Structures ---

@dataclass
class StarkConfig:
    """
    Proof configuration, the config section.

    Attributes:
        log_trace_domain_size: log2 of the trace domain size
        log_n_cosets: log2 of the blowup factor
        n_queries: Number of FRI queries
        proof_of_work_bits: Required leading zero bits of the grinding digest
        fri_step_sizes: log2 folding factor per FRI layer, leading 0 included
        log_last_layer_degree_bound: log2 of the last-layer degree bound
    """
    log_trace_domain_size: int
    log_n_cosets: int
    n_queries: int
    proof_of_work_bits: int
    fri_step_sizes: List[int]
    log_last_layer_degree_bound: int

    @classmethod
    def read(cls, reader: FeltReader) -> "StarkConfig":
        return cls(
            log_trace_domain_size=reader.read(),
            log_n_cosets=reader.read(),
            n_queries=reader.read(),
            proof_of_work_bits=reader.read(),
            fri_step_sizes=reader.read_span(),
            log_last_layer_degree_bound=reader.read(),
        )

    @property
    def n_layers(self) -> int:
        return len(self.fri_step_sizes) - 1

    @property
    def log_eval_domain_size(self) -> int:
        return self.log_trace_domain_size + self.log_n_cosets

    def validate(self) -> None:
        steps = self.fri_step_sizes
        if not steps or steps[0] != 0:
            raise VerificationFailed("first FRI step size must be 0")
        if not 1 <= self.n_layers <= MAX_FRI_LAYERS:
            raise VerificationFailed(f"invalid number of FRI layers: {self.n_layers}")
        for s in steps[1:]:
            if not 1 <= s <= MAX_FRI_STEP:
                raise VerificationFailed(f"invalid FRI step size: {s}")
        if self.log_last_layer_degree_bound > MAX_LOG_LAST_LAYER_DEGREE_BOUND:
            raise VerificationFailed(
                f"last layer degree bound too large: 2^{self.log_last_layer_degree_bound}"
            )
        if sum(steps) + self.log_last_layer_degree_bound != self.log_trace_domain_size:
            raise VerificationFailed("FRI steps do not cover the trace domain")
        if not 1 <= self.log_n_cosets <= MAX_LOG_N_COSETS:
            raise VerificationFailed(f"invalid log_n_cosets: {self.log_n_cosets}")
        if self.n_queries < 1:
            raise VerificationFailed("at least one query is required")
        if self.proof_of_work_bits > MAX_PROOF_OF_WORK_BITS:
            raise VerificationFailed(f"proof of work bits too large: {self.proof_of_work_bits}")


@dataclass
class PublicInput:
    """The public_input section; `flat` is its calldata encoding."""
    log_n_steps: int
    range_check_min: int
    range_check_max: int
    layout: int
    memory: List[int]
    flat: FlatSequence

    @classmethod
    def read(cls, reader: FeltReader) -> "PublicInput":
        log_n_steps, rc_min, rc_max, layout = reader.read_many(4)
        memory = reader.read_span()
        flat = [log_n_steps, rc_min, rc_max, layout, len(memory), *memory]
        return cls(log_n_steps, rc_min, rc_max, layout, memory, flat)

    def validate(self, layout: Layout, config: StarkConfig) -> None:
        if self.layout != layout.short_string:
            raise VerificationFailed(
                f"public input layout {decode_short_string(self.layout)} does not match {layout.value}"
            )
        if self.log_n_steps + LOG_CPU_COMPONENT_HEIGHT != config.log_trace_domain_size:
            raise VerificationFailed("trace domain size does not match the number of steps")
        if self.range_check_min > self.range_check_max:
            raise VerificationFailed("range check bounds are inverted")


@dataclass
class UnsentCommitment:
    """The unsent_commitment section."""
    original: int
    interaction: int
    composition: int
    oods_values: List[int]
    fri_commitments: List[int]
    last_layer_coefficients: List[int]
    proof_of_work_nonce: int

    @classmethod
    def read(cls, reader: FeltReader) -> "UnsentCommitment":
        original, interaction, composition = reader.read_many(3)
        return cls(
            original=original,
            interaction=interaction,
            composition=composition,
            oods_values=reader.read_span(),
            fri_commitments=reader.read_span(),
            last_layer_coefficients=reader.read_span(),
            proof_of_work_nonce=reader.read(),
        )

    def validate(self, params: LayoutParams, config: StarkConfig) -> None:
        if len(self.oods_values) != params.n_oods_values:
            raise VerificationFailed(
                f"expected {params.n_oods_values} OODS values, got {len(self.oods_values)}"
            )
        if len(self.fri_commitments) != config.n_layers:
            raise VerificationFailed(
                f"expected {config.n_layers} FRI commitments, got {len(self.fri_commitments)}"
            )
        n_coeffs = 1 << config.log_last_layer_degree_bound
        if len(self.last_layer_coefficients) != n_coeffs:
            raise VerificationFailed(
                f"expected {n_coeffs} last layer coefficients, got {len(self.last_layer_coefficients)}"
            )
        if self.proof_of_work_nonce >= NONCE_BOUND:
            raise VerificationFailed("proof of work nonce exceeds 64 bits")


@dataclass
class Decommitment:
    """Opened values of one commitment plus their authentication elements."""
    leaves: List[int]
    authentications: List[int]

    @classmethod
    def read(cls, reader: FeltReader) -> "Decommitment":
        return cls(leaves=reader.read_span(), authentications=reader.read_span())

    def check(self, name: str, commitment: int, n_queries: int, n_columns: int) -> np.ndarray:
        """Check against its commitment; returns the leaves as a query-major table."""
        if len(self.leaves) != n_queries * n_columns:
            raise VerificationFailed(
                f"{name} decommitment has {len(self.leaves)} leaves, "
                f"expected {n_queries} x {n_columns}"
            )
        if commitment_hash(self.leaves + self.authentications) != commitment:
            raise VerificationFailed(f"{name} commitment mismatch")
        return np.array(self.leaves, dtype=object).reshape(n_queries, n_columns)


# --- Replay Accumulator ---

@dataclass
class ReplayTrace:
    """
    Every state the verifier passed through during one replay.

    Attributes:
        constant: The FRI schedule, fixed after the initial phase
        variables: State before each FRI step, then the state after the last
        witnesses: Each step's layer fragment, then the last-layer fragment
        initial_length: Calldata elements consumed by the initial phase
    """
    constant: FriStateConstant
    variables: List[FriStateVariable] = field(default_factory=list)
    witnesses: List[FlatSequence] = field(default_factory=list)
    initial_length: int = 0


# --- Verifier ---

class ReplayVerifier:
    """
    Phase-by-phase verifier for one layout.

    Raises:
        UnsupportedLayout: If the layout has no verifier parameters.
    """

    def __init__(self, layout: "str | Layout"):
        self.layout, self.params = resolve_layout(layout)

    def verify_initial(self, reader: FeltReader) -> tuple[FriStateConstant, FriStateVariable, List[int]]:
        """Consume the initial calldata up to the first FRI layer.

        Returns:
            (constant state, state before the first step, last layer coefficients)
        """
        try:
            config = StarkConfig.read(reader)
            config.validate()
            public_input = PublicInput.read(reader)
            public_input.validate(self.layout, config)
            unsent = UnsentCommitment.read(reader)
            unsent.validate(self.params, config)
            original = Decommitment.read(reader)
            interaction = Decommitment.read(reader)
            composition = Decommitment.read(reader)
            n_fri_layers = reader.read()
        except ReaderExhausted as e:
            raise VerificationFailed(f"calldata truncated ({e})") from e

        if n_fri_layers != config.n_layers:
            raise VerificationFailed(
                f"witness declares {n_fri_layers} FRI layers, config has {config.n_layers}"
            )

        # --- Trace decommitments ---
        n_queries = config.n_queries
        rows = np.hstack([
            original.check("original", unsent.original, n_queries, self.params.n_original_columns),
            interaction.check("interaction", unsent.interaction, n_queries, self.params.n_interaction_columns),
            composition.check("composition", unsent.composition, n_queries, self.params.constraint_degree),
        ])

        # --- Fiat-Shamir ---
        # Draw order is fixed: commitments, OODS, beta, queries, then per
        # layer a folding challenge before absorbing that layer's commitment
        channel = Channel(hash_felts(public_input.flat))
        channel.put([unsent.original, unsent.interaction, unsent.composition])
        channel.put(unsent.oods_values)
        beta = channel.get_field()
        queries = channel.get_queries(n_queries, config.log_eval_domain_size)

        eval_points = []
        for commitment in unsent.fri_commitments:
            eval_points.append(channel.get_field())
            channel.put([commitment])
        channel.put(unsent.last_layer_coefficients)

        if not channel.verify_pow(unsent.proof_of_work_nonce, config.proof_of_work_bits):
            raise VerificationFailed("proof of work check failed")

        # --- Initial query values ---
        # Each query starts from its decommitted row combined with powers of beta
        values = [evaluate_polynomial(row.tolist(), beta) for row in rows]

        constant = FriStateConstant(
            n_layers=config.n_layers,
            commitments=list(unsent.fri_commitments),
            eval_points=eval_points,
            step_sizes=list(config.fri_step_sizes[1:]),
            last_layer_coefficients_hash=hash_felts(unsent.last_layer_coefficients),
        )
        variable = FriStateVariable(iter=0, queries=list(zip(queries, values)))
        logger.debug("Initial phase done: %d layers, queries %s", constant.n_layers, queries)
        return constant, variable, list(unsent.last_layer_coefficients)

    def verify_step(self, constant: FriStateConstant, variable: FriStateVariable,
                    layer: FriLayer) -> FriStateVariable:
        """Check one FRI layer and fold every query through it."""
        i = variable.iter
        if i >= constant.n_layers:
            raise VerificationFailed(f"FRI step {i + 1} beyond {constant.n_layers} layers")

        step = constant.step_sizes[i]
        coset_size = 1 << step
        n_queries = len(variable.queries)
        if len(layer.leaves) != n_queries * coset_size:
            raise VerificationFailed(
                f"FRI layer {i + 1} has {len(layer.leaves)} leaves, "
                f"expected {n_queries} x {coset_size}"
            )
        if commitment_hash(layer.leaves + layer.authentications) != constant.commitments[i]:
            raise VerificationFailed(f"FRI layer {i + 1} commitment mismatch")

        alpha = constant.eval_points[i]
        cosets = np.array(layer.leaves, dtype=object).reshape(n_queries, coset_size)
        folded = []
        for (index, value), coset in zip(variable.queries, cosets):
            # The coset must open the value folded so far at this query's slot
            if coset[index % coset_size] != value:
                raise VerificationFailed(f"FRI layer {i + 1} inconsistent at index {index}")
            folded.append((index >> step, evaluate_polynomial(coset.tolist(), alpha)))

        logger.debug("FRI step %d/%d verified (step size %d)", i + 1, constant.n_layers, step)
        return FriStateVariable(iter=i + 1, queries=folded)

    def verify_final(self, constant: FriStateConstant, variable: FriStateVariable,
                     coefficients: List[int]) -> None:
        """Check the folded values against the last-layer polynomial."""
        if variable.iter != constant.n_layers:
            raise VerificationFailed(
                f"final check after {variable.iter} of {constant.n_layers} FRI steps"
            )
        if hash_felts(coefficients) != constant.last_layer_coefficients_hash:
            raise VerificationFailed("last layer coefficients do not match the commitment")
        for index, value in variable.queries:
            if evaluate_polynomial(coefficients, index) != value:
                raise VerificationFailed(f"last layer evaluation mismatch at index {index}")


# --- Entry Points ---

def check_calldata(elements: Sequence[int], name: str = "calldata") -> None:
    """Reject calldata holding anything but canonical field elements."""
    for offset, element in enumerate(elements):
        try:
            check_felt(element)
        except ValueError as e:
            raise VerificationFailed(f"{name}: element {offset} is not a field element ({e})") from e


def verify_calldata(calldata: Sequence[int], layout: "str | Layout") -> ReplayTrace:
    """Verify monolithic calldata, recording every intermediate state.

    Raises:
        VerificationFailed: If the proof is rejected.
        UnsupportedLayout: If the layout has no verifier.
        ParseError: If the FRI witness does not decompose into layers.
    """
    verifier = ReplayVerifier(layout)
    logger.info("Verifying proof (layout %s, %d felts)", verifier.layout.value, len(calldata))

    check_calldata(calldata)
    if not calldata or calldata[-1] != CAIRO_VERSION:
        raise VerificationFailed(f"calldata must end with version tag {CAIRO_VERSION}")
    reader = FeltReader(calldata[:-1])

    constant, variable, coefficients = verifier.verify_initial(reader)
    trace = ReplayTrace(constant=constant, variables=[variable], initial_length=reader.offset)

    layers = group_witness_into_layers(reader.read_rest())
    if len(layers) != constant.n_layers:
        raise VerificationFailed(f"expected {constant.n_layers} FRI layers, got {len(layers)}")

    for layer in layers:
        variable = verifier.verify_step(constant, variable, layer)
        trace.variables.append(variable)
        trace.witnesses.append(layer.flat())

    verifier.verify_final(constant, variable, coefficients)
    trace.witnesses.append(flatten(coefficients))

    logger.info("Proof verified (%d FRI layers)", constant.n_layers)
    return trace


def verify_sections(sections: ProofSections, layout: "str | Layout") -> ReplayTrace:
    """Verify parsed proof sections through their monolithic calldata."""
    return verify_calldata(monolith_calldata(sections), layout)
