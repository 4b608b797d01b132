"""End-to-end workflows composed from the service layer."""

from .interpretation_pipeline import run  # noqa: F401

__all__ = ["run"]
