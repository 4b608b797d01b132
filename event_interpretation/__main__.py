"""Command line entry point: ``python -m event_interpretation EVENT_ID …``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .errors import InterpretationError
from .logging_config import logging as _  # noqa: F401  # ensure config applied early
from .services.storage import InterpretationStore
from .workflows.interpretation_pipeline import run

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="event_interpretation",
        description="Generate and store interpretations for recorded events.",
    )
    parser.add_argument("event_ids", nargs="*", metavar="EVENT_ID")
    parser.add_argument(
        "--ensure-indexes",
        action="store_true",
        help="create the unique event_id index before processing",
    )
    args = parser.parse_args(argv)

    if not args.event_ids and not args.ensure_indexes:
        parser.error("at least one EVENT_ID or --ensure-indexes is required")

    store = InterpretationStore()
    if args.ensure_indexes:
        store.ensure_indexes()

    failures = 0
    for event_id in args.event_ids:
        try:
            outcome = run(event_id, store=store).to_dict()
        except InterpretationError as exc:
            failures += 1
            outcome = {
                "success": False,
                "eventId": event_id,
                "error": exc.message,
                "errorKind": type(exc).__name__,
                "retryable": exc.retryable,
            }
        print(json.dumps(outcome))

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
