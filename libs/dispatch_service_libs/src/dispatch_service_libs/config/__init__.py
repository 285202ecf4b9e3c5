"""Configuration utilities for Dispatch services."""

from .service_base import ServiceSettings

__all__ = ["ServiceSettings"]
