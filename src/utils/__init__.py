"""
Utility functions for the GPIO layer
"""

from .enum_helper import EnumHelper
from .logger import get_logger, get_category_logger, configure_logger

__all__ = [
    'EnumHelper',
    'get_logger',
    'get_category_logger',
    'configure_logger',
]
