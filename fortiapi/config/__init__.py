"""
fortiapi Configuration Module
"""

from .client_config import ClientConfig

__all__ = ['ClientConfig']
