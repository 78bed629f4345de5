"""
Annotation merger tests.
"""

import json

import pytest

from calldata.annotations import merge_annotation_files, merge_annotations, read_annotation_lines
from calldata.errors import MissingAnnotationFile

ANNOTATIONS = [
    "P->V[0:32]: /cpu air/STARK/Original/Commit on Trace: Commitment: Hash(0x1)",
    "V->P: /cpu air/STARK/Interaction: Interaction element #0: Field Element(0x2)",
    "P->V[32:64]: /cpu air/STARK/Interaction/Commit on Trace: Commitment: Hash(0x3)",
]
EXTRA_ANNOTATIONS = [
    "P->V[64:96]: /cpu air/STARK/Out Of Domain Sampling/OODS values: Field Element(0x4)",
]


class TestMergeAnnotations:

    def test_adds_fields_in_order(self):
        proof = {"proof_hex": "0xab", "public_input": {"n_steps": 8}}
        merged = merge_annotations(proof, ANNOTATIONS, EXTRA_ANNOTATIONS)
        assert merged["annotations"] == ANNOTATIONS
        assert merged["extra_annotations"] == EXTRA_ANNOTATIONS
        assert merged["proof_hex"] == "0xab"

    def test_input_not_modified(self):
        proof = {"public_input": {"n_steps": 8}}
        merge_annotations(proof, ANNOTATIONS, EXTRA_ANNOTATIONS)
        assert proof == {"public_input": {"n_steps": 8}}

    def test_stable_when_rerun(self):
        proof = {"proof_hex": "0xab"}
        first = merge_annotations(proof, ANNOTATIONS, EXTRA_ANNOTATIONS)
        second = merge_annotations(proof, ANNOTATIONS, EXTRA_ANNOTATIONS)
        assert json.dumps(first) == json.dumps(second)
        # Merging into an already merged proof replaces, never appends
        assert merge_annotations(first, ANNOTATIONS, EXTRA_ANNOTATIONS) == first

    @pytest.mark.parametrize("annotations,extra,missing", [
        (None, EXTRA_ANNOTATIONS, "annotations"),
        (ANNOTATIONS, None, "extra_annotations"),
    ])
    def test_missing_input(self, annotations, extra, missing):
        with pytest.raises(MissingAnnotationFile) as exc_info:
            merge_annotations({}, annotations, extra)
        assert exc_info.value.name == missing


class TestAnnotationFiles:

    def test_read_lines(self, tmp_path):
        path = tmp_path / "annotations.txt"
        path.write_text("\n".join(ANNOTATIONS) + "\n")
        assert read_annotation_lines(path) == ANNOTATIONS

    def test_every_line_kept_verbatim(self, tmp_path):
        path = tmp_path / "annotations.txt"
        path.write_text("first  \n\nthird\n")
        assert read_annotation_lines(path) == ["first  ", "", "third"]

    def test_read_none(self):
        assert read_annotation_lines(None) is None

    def test_merge_files(self, tmp_path):
        proof_path = tmp_path / "proof.json"
        proof_path.write_text(json.dumps({"proof_hex": "0xab"}))
        annotation_path = tmp_path / "annotations.txt"
        annotation_path.write_text("\n".join(ANNOTATIONS))
        extra_path = tmp_path / "extra_annotations.txt"
        extra_path.write_text("\n".join(EXTRA_ANNOTATIONS))
        out = tmp_path / "merged.json"

        merge_annotation_files(proof_path, annotation_path, extra_path, out)
        first = out.read_text()
        merge_annotation_files(proof_path, annotation_path, extra_path, out)

        assert out.read_text() == first
        assert json.loads(first)["annotations"] == ANNOTATIONS

    def test_missing_file_writes_nothing(self, tmp_path):
        proof_path = tmp_path / "proof.json"
        proof_path.write_text("{}")
        out = tmp_path / "merged.json"
        with pytest.raises(MissingAnnotationFile):
            merge_annotation_files(proof_path, None, None, out)
        assert not out.exists()
