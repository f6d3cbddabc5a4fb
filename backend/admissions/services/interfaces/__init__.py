"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .complement import ComplementProvider, complement_of

__all__ = ['ComplementProvider', 'complement_of']
