"""
Core domain layer: roles and access guards, profiles and dataset models,
filter state and the row search engine
"""

from .dataset import Dataset
from .filter_state import FilterState
from .models import DatasetSummary, Department, UserProfile
from .roles import AccessTier, Role, can_access

__all__ = [
    "Dataset",
    "FilterState",
    "DatasetSummary",
    "Department",
    "UserProfile",
    "AccessTier",
    "Role",
    "can_access",
]
