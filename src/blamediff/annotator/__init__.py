"""Annotation engine, pipeline coordinator, and candidate summary."""

from blamediff.annotator.engine import DiffAnnotator, ParseState
from blamediff.annotator.pipeline import (
    PipelineError,
    annotate_diff,
    direct_diff,
    wrapping_diff,
)
from blamediff.annotator.summary import sort_summary, write_candidate_summary

__all__ = [
    "DiffAnnotator",
    "ParseState",
    "PipelineError",
    "annotate_diff",
    "direct_diff",
    "sort_summary",
    "wrapping_diff",
    "write_candidate_summary",
]
