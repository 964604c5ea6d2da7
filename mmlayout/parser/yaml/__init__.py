"""
YAML loading for layout collections.
"""

from .collection_loader import YamlCollectionLoader, dump_collection, load_collection
from .errors import ParseError

__all__ = ["YamlCollectionLoader", "ParseError", "load_collection", "dump_collection"]
