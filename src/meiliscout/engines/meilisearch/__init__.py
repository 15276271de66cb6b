from meiliscout.engines.meilisearch.engine import MeiliSearchEngine

__all__ = ["MeiliSearchEngine"]
