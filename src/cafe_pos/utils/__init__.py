"""
Utilities shared by the API and the order item engine.
"""

from .logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
