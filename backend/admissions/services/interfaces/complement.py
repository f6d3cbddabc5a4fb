"""
Complement provider interface.
Allows swapping between a co-located and a distributed eligibility computation
without changing the admission matcher.
"""

from abc import ABC, abstractmethod
from typing import AbstractSet, Set


def complement_of(excluded: AbstractSet[str], universe: AbstractSet[str]) -> Set[str]:
    """Given (S, U), returns U - S (the relative complement of S in U)."""
    return set(universe) - set(excluded)


class ComplementProvider(ABC):
    """
    Interface for computing the hospitals a patient may be admitted to.

    Implementations:
    - LocalComplementProvider: universe read from the hospital repository
    - RemoteComplementProvider: delegated to the complement service over HTTP
    """

    name: str = "abstract"

    @abstractmethod
    async def compute_complement(self, excluded: AbstractSet[str]) -> Set[str]:
        """
        Return the universal set of hospital names minus `excluded`.

        Names in `excluded` that are not in the universe are ignored.

        Raises:
            RepositoryError: the local universe could not be read
            ExternalServiceError: the remote computation failed
        """
