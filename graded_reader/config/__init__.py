"""Configuration management for graded reader components."""

from .settings import Settings

__all__ = ["Settings"]
