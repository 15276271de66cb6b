"""Search engines — Index drivers behind searchable models.

Built-in engines:
  - meilisearch: Meilisearch through the official ``meilisearch`` client
  - null: discards mutations, never matches

Implement ``Engine`` to connect another index backend.
"""
