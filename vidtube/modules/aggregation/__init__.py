"""
Aggregation Query Layer - Black Box Interface

Purpose: Relational-style reads (joins, counts, membership) over the document store
Interface: AggregationQueries, pipeline builders in pipelines.py
Hidden: Stage ordering, lookup sub-pipelines, projection allow-lists
"""

from . import pipelines
from .queries import AggregationQueries

__all__ = ["AggregationQueries", "pipelines"]
