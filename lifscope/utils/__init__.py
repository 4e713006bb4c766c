"""
Simple utilities shared by the engine, driver and portal.
"""
from .logging import get_logger, LEVELS
