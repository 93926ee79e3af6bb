"""Reusable type definitions shared by the phony XMSS engine."""

from .base import StrictBaseModel

__all__ = [
    "StrictBaseModel",
]
