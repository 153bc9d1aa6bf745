"""
Record store and query engine over a key-value state backend.
"""

# Package initialization for core module
from .backend import IStateBackend, IStateQueryIterator, InMemoryStateBackend, KV
from .dispatcher import Response, invoke
from .errors import (
    ArgumentCountError,
    ArgumentEmptyError,
    BackendError,
    DuplicateKeyError,
    InfoShareError,
    NotFoundError,
    SelectorError,
    SerializationError,
)
from .query import QueryResult, encode_query_results, query_by_attribute
from .schema import DOC_TYPE, InfoRecord
from .sqlite_backend import SQLiteStateBackend
from .store import create_info, read_info

__all__ = [
    'IStateBackend',
    'IStateQueryIterator',
    'InMemoryStateBackend',
    'SQLiteStateBackend',
    'KV',
    'Response',
    'invoke',
    'ArgumentCountError',
    'ArgumentEmptyError',
    'BackendError',
    'DuplicateKeyError',
    'InfoShareError',
    'NotFoundError',
    'SelectorError',
    'SerializationError',
    'QueryResult',
    'encode_query_results',
    'query_by_attribute',
    'DOC_TYPE',
    'InfoRecord',
    'create_info',
    'read_info',
]
