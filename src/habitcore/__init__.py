"""Habit completion and streak engine."""

from __future__ import annotations

from .config import BaseConfig
from .services.completion import CompletionService

__all__ = ["BaseConfig", "CompletionService"]
