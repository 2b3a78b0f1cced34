"""Repository interfaces for contracts and users.

The workflow engine and register only talk to these interfaces, so a
persistent store can replace the in-memory one without touching them.
"""

from abc import ABC, abstractmethod
from typing import List

from contracts import Contract, User


class ContractRepository(ABC):
    """Abstract store for the contract collection."""

    @abstractmethod
    def get_all(self) -> List[Contract]:
        """Return every contract in collection order."""
        pass

    @abstractmethod
    def get_by_id(self, contract_id: str) -> Contract:
        """Return one contract.

        Raises:
            NotFoundError: If no contract has this id
        """
        pass

    @abstractmethod
    def upsert(self, contract: Contract) -> Contract:
        """Insert a new contract or replace the stored one with the same id."""
        pass

    def exists(self, contract_id: str) -> bool:
        return any(c.id == contract_id for c in self.get_all())


class UserDirectory(ABC):
    """Abstract lookup for seeded users."""

    @abstractmethod
    def get_all(self) -> List[User]:
        pass

    @abstractmethod
    def get_by_id(self, user_id: str) -> User:
        """Return one user.

        Raises:
            NotFoundError: If no user has this id
        """
        pass

    @abstractmethod
    def set_active(self, admin_id: str, user_id: str, is_active: bool) -> User:
        """Activate or deactivate a user. Only Admin users may do this."""
        pass
