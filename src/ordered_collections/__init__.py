"""
ordered_collections — неизменяемые упорядоченные коллекции

Два независимых value-типа поверх упорядоченного словаря (key -> value):
- Collection: map / filter / sort / slice / flatten
- DataSet: расширенный набор операций, включая json_encode
"""

from .collection import Collection
from .core import (
    DEFAULT_JSON_DEPTH,
    DEFAULT_SPLIT_LIMIT,
    FlattenError,
    InvalidArgumentError,
    JsonEncodeError,
    JsonFlag,
    OrderedCollectionError,
)
from .dataset import CompareMode, DataSet

__all__ = [
    # Value types
    "Collection",
    "DataSet",
    "CompareMode",
    # JSON
    "JsonFlag",
    "DEFAULT_JSON_DEPTH",
    "DEFAULT_SPLIT_LIMIT",
    # Errors
    "OrderedCollectionError",
    "InvalidArgumentError",
    "FlattenError",
    "JsonEncodeError",
]
