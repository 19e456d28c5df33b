"""Compiler — evaluates predicates in memory and translates them for queries."""

from preset_authz.compiler._eval import eval_predicate, resolve_path
from preset_authz.compiler._query import authorize_query
from preset_authz.compiler._sql import to_sql
from preset_authz.compiler._where import compile_where

__all__ = [
    "authorize_query",
    "compile_where",
    "eval_predicate",
    "resolve_path",
    "to_sql",
]
