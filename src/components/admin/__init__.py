"""Owner-gated create/update/delete for portfolio content."""

from .component import AdminController
from .models import MutationResult
from .ports import RepositoryPort

__all__ = ["AdminController", "MutationResult", "RepositoryPort"]
