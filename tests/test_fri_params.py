"""
FRI parameter computation tests.

The step schedule must satisfy
    log2(#steps) + 4 = log2(last_layer_degree_bound) + sum(fri_step_list)
or the prover's output is rejected.
"""

import pytest

from calldata.fri_params import (
    DEFAULT_N_QUERIES,
    DEFAULT_PROOF_OF_WORK_BITS,
    LAST_LAYER_DEGREE_BOUND,
    ceil_log2,
    compute_fri_parameters,
    compute_fri_steps,
)


class TestCeilLog2:

    @pytest.mark.parametrize("x,expected", [
        (1, 0),
        (2, 1),
        (3, 2),
        (32, 5),
        (1000, 10),
        (524288, 19),
    ])
    def test_values(self, x, expected):
        assert ceil_log2(x) == expected

    def test_zero_rejected(self):
        with pytest.raises(ValueError):
            ceil_log2(0)


class TestComputeFriParameters:

    @pytest.mark.parametrize("trace_steps,expected", [
        (32768, [0, 4, 4, 4, 1]),
        (524288, [0, 4, 4, 4, 4, 1]),
        (768, [0, 4, 4]),
    ])
    def test_step_list(self, trace_steps, expected):
        params = compute_fri_parameters(trace_steps)
        assert params.fri_step_list == expected
        assert params.last_layer_degree_bound == 64

    def test_defaults(self):
        params = compute_fri_parameters(32768)
        assert params.n_queries == DEFAULT_N_QUERIES == 16
        assert params.proof_of_work_bits == DEFAULT_PROOF_OF_WORK_BITS == 32

    @pytest.mark.parametrize("trace_steps", [3, 100, 1 << 20, 12345678])
    def test_steps_cover_trace(self, trace_steps):
        params = compute_fri_parameters(trace_steps)
        assert params.fri_step_list[0] == 0
        assert all(1 <= s <= 4 for s in params.fri_step_list[1:])
        assert sum(params.fri_step_list) + ceil_log2(LAST_LAYER_DEGREE_BOUND) == ceil_log2(trace_steps) + 4

    @pytest.mark.parametrize("trace_steps", [0, 1, 2])
    def test_too_short_rejected(self, trace_steps):
        with pytest.raises(ValueError):
            compute_fri_parameters(trace_steps)

    def test_to_json(self):
        assert compute_fri_parameters(768).to_json() == {
            "fri_step_list": [0, 4, 4],
            "last_layer_degree_bound": 64,
            "n_queries": 16,
            "proof_of_work_bits": 32,
        }

    def test_remainder_step(self):
        assert compute_fri_steps(11, 6, 4) == [4, 4, 1]
        assert compute_fri_steps(2, 6, 4) == []
