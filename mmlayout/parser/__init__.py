"""
Parsers for layout collection documents.
"""

from .yaml import ParseError, YamlCollectionLoader, dump_collection, load_collection

__all__ = ["YamlCollectionLoader", "ParseError", "load_collection", "dump_collection"]
