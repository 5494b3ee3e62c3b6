"""Shared Kernel Enums"""

from src.service.shared_kernel.domain.enum.dimension import Dimension
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind
from src.service.shared_kernel.domain.enum.identity_source import IdentitySource
from src.service.shared_kernel.domain.enum.listing_kind import ListingKind

__all__ = ['Dimension', 'ErrorKind', 'IdentitySource', 'ListingKind']
