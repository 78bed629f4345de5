"""Annotation merging for recursive verification.

The recursive verifier takes the proof JSON together with the verifier's
transcript annotations. Both annotation files are line-oriented; each line
becomes one array entry.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from calldata.errors import MissingAnnotationFile
from calldata.output import write_text_atomic

logger = logging.getLogger(__name__)


def merge_annotations(
    proof_json: dict[str, Any],
    annotation_lines: Optional[Sequence[str]],
    extra_annotation_lines: Optional[Sequence[str]],
) -> dict[str, Any]:
    """Return a copy of proof_json with `annotations` and `extra_annotations`.

    Existing annotation fields are replaced, so merging into an already
    merged proof gives the same result.

    Raises:
        MissingAnnotationFile: If either line source is missing.
    """
    if annotation_lines is None:
        raise MissingAnnotationFile("annotations")
    if extra_annotation_lines is None:
        raise MissingAnnotationFile("extra_annotations")

    merged = copy.deepcopy(proof_json)
    merged["annotations"] = list(annotation_lines)
    merged["extra_annotations"] = list(extra_annotation_lines)
    return merged


def read_annotation_lines(path: Optional[Path]) -> Optional[list[str]]:
    """Read an annotation file, one entry per line."""
    if path is None:
        return None
    text = Path(path).read_text(encoding="utf-8")
    return text.splitlines()


def merge_annotation_files(
    proof_path: Path,
    annotation_path: Optional[Path],
    extra_annotation_path: Optional[Path],
    output_path: Path,
) -> dict[str, Any]:
    """Merge annotation files into a proof file and write the result."""
    annotations = read_annotation_lines(annotation_path)
    extra_annotations = read_annotation_lines(extra_annotation_path)
    with open(proof_path) as f:
        proof_json = json.load(f)

    merged = merge_annotations(proof_json, annotations, extra_annotations)
    write_text_atomic(Path(output_path), json.dumps(merged, indent=2))
    logger.info(
        "Merged %d annotations and %d extra annotations into %s",
        len(merged["annotations"]), len(merged["extra_annotations"]), output_path,
    )
    return merged
