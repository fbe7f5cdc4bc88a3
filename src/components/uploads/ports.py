"""
Upload relay port definitions.
"""

from src.core.ports.storage import ObjectStoragePort
from src.core.ports.time import TimePort

__all__ = ["ObjectStoragePort", "TimePort"]
