"""Base engine interface — Abstract classes for index drivers."""

from meiliscout.engines.base.engine import Engine

__all__ = ["Engine"]
