"""
Core primitives: errors, logging, ordered pair operations and JSON encoding.

Only ordered_ops.is_array refers back to Collection and DataSet (imported lazily).
"""

from .errors import (
    FlattenError,
    InvalidArgumentError,
    JsonEncodeError,
    OrderedCollectionError,
)
from .json_encoding import DEFAULT_JSON_DEPTH, JsonEncodeConfig, JsonFlag, encode_pairs
from .ordered_ops import DEFAULT_SPLIT_LIMIT

__all__ = [
    # Errors
    "OrderedCollectionError",
    "InvalidArgumentError",
    "FlattenError",
    "JsonEncodeError",
    # JSON
    "DEFAULT_JSON_DEPTH",
    "JsonFlag",
    "JsonEncodeConfig",
    "encode_pairs",
    # Ordered ops
    "DEFAULT_SPLIT_LIMIT",
]
