"""Environment-driven settings for the underwriting service."""
from . import settings

__all__ = ["settings"]
