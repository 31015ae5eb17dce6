"""
fortiapi Core Module

Request normalization, transport dispatch and response reduction.
"""

from .engine import RequestEngine, reduce_response
from .subset import subset, subset_position

__all__ = ['RequestEngine', 'reduce_response', 'subset', 'subset_position']
