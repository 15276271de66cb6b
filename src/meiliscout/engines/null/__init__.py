from meiliscout.engines.null.engine import NullEngine

__all__ = ["NullEngine"]
