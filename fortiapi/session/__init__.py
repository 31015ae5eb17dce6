"""
fortiapi Session Module

Provides the session-bound Client.
"""

from .client import Client, WORKSPACE_MODES

__all__ = ['Client', 'WORKSPACE_MODES']
