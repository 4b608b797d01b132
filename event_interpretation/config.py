"""Centralised configuration for event_interpretation.

Environment variables are loaded once and all related constants are
grouped by service for easier maintenance.
"""

from __future__ import annotations

import os
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load environment variables from `.env` (if present)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Core credentials (from environment)
# ---------------------------------------------------------------------------
OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
MONGODB_URI: str | None = os.getenv("MONGODB_URI")

# ---------------------------------------------------------------------------
# Persistence settings
# Transactions require MONGODB_URI to point at a replica set or a sharded
# cluster; a standalone mongod rejects transactions.
# ---------------------------------------------------------------------------
MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "motif")
EVENTS_COLLECTION: str = "events"
USERS_COLLECTION: str = "users"
INTERPRETATIONS_COLLECTION: str = "interpretations"

# ---------------------------------------------------------------------------
# Model settings
# ---------------------------------------------------------------------------
EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
EMBEDDING_DIMENSIONS: int = int(os.getenv("EMBEDDING_DIMENSIONS", "1536"))
INTERPRETATION_MODEL: str = os.getenv("INTERPRETATION_MODEL", "gpt-4.1-mini")
INTERPRETATION_TEMPERATURE: float = float(os.getenv("INTERPRETATION_TEMPERATURE", "0.4"))

# ---------------------------------------------------------------------------
# Interpretation content bounds (inclusive, in characters)
# ---------------------------------------------------------------------------
INTERPRETATION_MIN_LENGTH: int = 200
INTERPRETATION_MAX_LENGTH: int = 15000

# ---------------------------------------------------------------------------
# Re-exported names
# ---------------------------------------------------------------------------
__all__ = [
    # credentials
    "OPENAI_API_KEY",
    "MONGODB_URI",
    # persistence
    "MONGODB_DATABASE",
    "EVENTS_COLLECTION",
    "USERS_COLLECTION",
    "INTERPRETATIONS_COLLECTION",
    # models
    "EMBEDDING_MODEL",
    "EMBEDDING_DIMENSIONS",
    "INTERPRETATION_MODEL",
    "INTERPRETATION_TEMPERATURE",
    # bounds
    "INTERPRETATION_MIN_LENGTH",
    "INTERPRETATION_MAX_LENGTH",
]
