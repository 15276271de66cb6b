"""meiliscout — Keep searchable models in sync with Meilisearch.

Quick start::

    from meiliscout import Searchable

    class Post(Searchable):
        __scout_index__ = "posts"

    Post.search("mustang").take(10).get()
"""

from meiliscout.models.builder import Builder
from meiliscout.models.collection import ModelCollection
from meiliscout.models.searchable import Searchable

__version__ = "0.1.0"

__all__ = ["Builder", "ModelCollection", "Searchable", "__version__"]
