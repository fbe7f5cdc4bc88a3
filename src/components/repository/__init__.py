"""
Repository component - uniform CRUD over every portfolio entity.

One generic Repository, parameterized by an EntitySchema.
"""

from .component import Repository
from .ports import TableStorePort, TimePort

__all__ = [
    # Entry points
    "Repository",
    # Ports
    "TableStorePort",
    "TimePort",
]
