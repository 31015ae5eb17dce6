"""
fortiapi Logging Module

Provides structured JSON logging.
"""

from .logger import configure_logging, get_logger, PACKAGE_LOGGER, StructuredFormatter

__all__ = ['configure_logging', 'get_logger', 'PACKAGE_LOGGER', 'StructuredFormatter']
