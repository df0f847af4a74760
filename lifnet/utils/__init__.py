"""
Simple utilities shared across lifnet.
"""
from .logging import get_logger, null_logger
