"""
Endpoint groupings live here to keep API surface area segmented by domain.
"""

from .accounts import AccountsAPI
from .oauth import OAuthAPI

__all__ = ["AccountsAPI", "OAuthAPI"]
