"""Top-level package for the event-interpretation project.

This package exposes the pipeline's run() helper so callers can do
`python -m event_interpretation <event-id>` or
`from event_interpretation import run; run(event_id)`.
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("event-interpretation")
except _metadata.PackageNotFoundError:  # pragma: no cover – running from source
    __version__ = "0.0.0"

from .workflows.interpretation_pipeline import run  # convenience re-export

__all__ = ["run", "__version__"]
