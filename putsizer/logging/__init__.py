"""Logging module."""
from .sizer_logger import SizerLogger

__all__ = ['SizerLogger']
