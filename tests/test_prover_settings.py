"""
Prover document and program input tests.
"""

import json

import pytest

from calldata.errors import ParseError
from calldata.program_input import parse_program_input
from calldata.prover_settings import (
    format_air_public_input,
    get_prover_config,
    get_prover_parameters,
    prover_parameters_from_air_public_input,
    write_prover_files,
)


class TestProverParameters:

    def test_document_for_32768_steps(self):
        assert get_prover_parameters(32768).to_json() == {
            "field": "PrimeField0",
            "channel_hash": "poseidon3",
            "commitment_hash": "keccak256_masked160_lsb",
            "n_verifier_friendly_commitment_layers": 9999,
            "pow_hash": "keccak256",
            "statement": {"page_hash": "pedersen"},
            "stark": {
                "fri": {
                    "fri_step_list": [0, 4, 4, 4, 1],
                    "last_layer_degree_bound": 64,
                    "n_queries": 16,
                    "proof_of_work_bits": 32,
                },
                "log_n_cosets": 2,
            },
            "use_extension_field": False,
            "verifier_friendly_channel_updates": True,
            "verifier_friendly_commitment_hash": "poseidon3",
        }

    def test_key_order(self):
        keys = list(get_prover_parameters(768).to_json())
        assert keys[0] == "field"
        assert keys[-1] == "verifier_friendly_commitment_hash"

    def test_config(self):
        assert get_prover_config().to_json() == {
            "constraint_polynomial_task_size": 256,
            "n_out_of_memory_merkle_layers": 0,
            "table_prover_n_tasks_per_segment": 32,
        }

    def test_from_air_public_input(self):
        params = prover_parameters_from_air_public_input({"n_steps": 524288, "layout": "recursive"})
        assert params.stark.fri.fri_step_list == [0, 4, 4, 4, 4, 1]

    @pytest.mark.parametrize("doc", [{}, {"n_steps": "8"}, {"n_steps": 0}, {"n_steps": True}])
    def test_from_air_public_input_invalid(self, doc):
        with pytest.raises(ValueError):
            prover_parameters_from_air_public_input(doc)

    def test_write_files(self, tmp_path):
        params_path, config_path = write_prover_files(32768, tmp_path)
        assert json.loads(params_path.read_text())["stark"]["fri"]["fri_step_list"] == [0, 4, 4, 4, 1]
        assert json.loads(config_path.read_text())["constraint_polynomial_task_size"] == 256


class TestFormatAirPublicInput:

    def test_prefixes_values(self):
        doc = {
            "layout": "recursive",
            "public_memory": [
                {"address": 1, "value": "4a", "page": 0},
                {"address": 2, "value": "0x10", "page": 0},
            ],
        }
        formatted = format_air_public_input(doc)
        assert [m["value"] for m in formatted["public_memory"]] == ["0x4a", "0x10"]
        # Input untouched
        assert doc["public_memory"][0]["value"] == "4a"

    def test_idempotent(self):
        doc = {"public_memory": [{"value": "1"}]}
        once = format_air_public_input(doc)
        assert format_air_public_input(once) == once

    def test_no_public_memory(self):
        assert format_air_public_input({"n_steps": 8}) == {"n_steps": 8}


class TestParseProgramInput:

    @pytest.mark.parametrize("text,expected", [
        ("", []),
        ("1 2 3", [1, 2, 3]),
        ("1 2 [1 2 3]", [1, 2, [1, 2, 3]]),
        ("[ 1 2 ] 0x10", [[1, 2], 16]),
        ("[]", [[]]),
        ("[1 2", [[1, 2]]),
    ])
    def test_valid(self, text, expected):
        assert parse_program_input(text) == expected

    @pytest.mark.parametrize("text", ["1 x", "1 ]", "[1 [2]]", "-5"])
    def test_invalid(self, text):
        with pytest.raises(ParseError):
            parse_program_input(text)
