"""
fortiapi Utilities
"""

from .config_loader import ConfigLoader, parse_flag

__all__ = ['ConfigLoader', 'parse_flag']
