"""FRI parameter computation from trace length.

Sizing rule (Stone prover documentation):
    log2(#steps) + 4 = log2(last_layer_degree_bound) + sum(fri_step_list)
so
    sum(fri_step_list) = log2(#steps) + 4 - log2(last_layer_degree_bound)

The sum is split into steps of at most MAX_FRI_STEP, after a mandatory
leading step of 0. A wrong constant here yields a proof the verifier rejects.
"""

from dataclasses import asdict, dataclass

# --- Constants ---

DEFAULT_N_QUERIES = 16
DEFAULT_PROOF_OF_WORK_BITS = 32
LAST_LAYER_DEGREE_BOUND = 64
MAX_FRI_STEP = 4

# log2 of the CPU component height: each Cairo step spans 16 trace rows
LOG_CPU_COMPONENT_HEIGHT = 4


@dataclass
class FriParameters:
    """FRI section of the prover parameter file."""
    fri_step_list: list[int]
    last_layer_degree_bound: int
    n_queries: int
    proof_of_work_bits: int

    def to_json(self) -> dict:
        return asdict(self)


def ceil_log2(x: int) -> int:
    """ceil(log2(x)) for x >= 1, via the next power of two."""
    if x < 1:
        raise ValueError(f"ceil_log2 requires x >= 1, got {x}")
    next_power_of_two = 1 << (x - 1).bit_length()
    return next_power_of_two.bit_length() - 1


def compute_fri_steps(nb_steps_log: int, last_layer_degree_bound_log: int,
                      max_step_value: int) -> list[int]:
    """Split the FRI step sum into full steps plus one remainder step."""
    sum_of_fri_steps = nb_steps_log + LOG_CPU_COMPONENT_HEIGHT - last_layer_degree_bound_log
    if sum_of_fri_steps < 0:
        raise ValueError(
            f"trace too short: 2^{nb_steps_log} steps is below the last layer degree bound"
        )
    quotient, remainder = divmod(sum_of_fri_steps, max_step_value)

    fri_steps = [max_step_value] * quotient
    if remainder > 0:
        fri_steps.append(remainder)
    return fri_steps


def compute_fri_parameters(trace_steps: int) -> FriParameters:
    """Derive FRI parameters for a trace of trace_steps Cairo steps.

    Raises:
        ValueError: If trace_steps is 0 or too small for the last layer.
    """
    if trace_steps < 1:
        raise ValueError(f"trace_steps must be positive, got {trace_steps}")

    nb_steps_log = ceil_log2(trace_steps)
    last_layer_degree_bound_log = ceil_log2(LAST_LAYER_DEGREE_BOUND)

    # The first FRI step must be 0
    fri_steps = [0]
    fri_steps.extend(compute_fri_steps(nb_steps_log, last_layer_degree_bound_log, MAX_FRI_STEP))

    return FriParameters(
        fri_step_list=fri_steps,
        last_layer_degree_bound=LAST_LAYER_DEGREE_BOUND,
        n_queries=DEFAULT_N_QUERIES,
        proof_of_work_bits=DEFAULT_PROOF_OF_WORK_BITS,
    )
