"""Utility functions for the event interpretation project.

Re-exports the text-cleaning, parsing and datetime helpers so that imports
like `from ..utils import decode_completion` work as expected.
"""

from .text_cleaning import strip_code_fences  # noqa: F401
from .datetime_utils import get_current_timestamp, to_iso8601  # noqa: F401
from .llm_parsing import decode_completion  # noqa: F401

__all__ = [
    "strip_code_fences",
    "get_current_timestamp",
    "to_iso8601",
    "decode_completion",
]
