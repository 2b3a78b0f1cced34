"""In-memory repository implementations."""

from typing import Dict, Iterable, List

from loguru import logger

from contracts import Contract, User, UserRole
from errors import ContractValidationError, NotFoundError
from repository.base import ContractRepository, UserDirectory


class InMemoryContractRepository(ContractRepository):
    """Contract collection held in an insertion-ordered dict.

    Stored contracts are copies; callers never hold a reference into the
    store, so a failed operation cannot leave a half-applied change behind.
    """

    def __init__(self, contracts: Iterable[Contract] = ()):
        self._contracts: Dict[str, Contract] = {}
        for contract in contracts:
            if contract.id in self._contracts:
                raise ContractValidationError(
                    f"Duplicate contract id {contract.id}",
                    details={"id": "must be unique"},
                )
            self._contracts[contract.id] = contract.model_copy(deep=True)
        logger.debug(f"Loaded {len(self._contracts)} contracts into memory")

    def get_all(self) -> List[Contract]:
        return [c.model_copy(deep=True) for c in self._contracts.values()]

    def get_by_id(self, contract_id: str) -> Contract:
        try:
            return self._contracts[contract_id].model_copy(deep=True)
        except KeyError:
            raise NotFoundError(resource="Contract", resource_id=contract_id) from None

    def upsert(self, contract: Contract) -> Contract:
        # Replacing keeps the original position in the collection
        self._contracts[contract.id] = contract.model_copy(deep=True)
        return contract

    def exists(self, contract_id: str) -> bool:
        return contract_id in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)


class InMemoryUserDirectory(UserDirectory):
    """Seeded users keyed by id."""

    def __init__(self, users: Iterable[User] = ()):
        self._users: Dict[str, User] = {}
        for user in users:
            if user.id in self._users:
                raise ContractValidationError(
                    f"Duplicate user id {user.id}",
                    details={"id": "must be unique"},
                )
            self._users[user.id] = user.model_copy()

    def get_all(self) -> List[User]:
        return [u.model_copy() for u in self._users.values()]

    def get_by_id(self, user_id: str) -> User:
        try:
            return self._users[user_id].model_copy()
        except KeyError:
            raise NotFoundError(resource="User", resource_id=user_id) from None

    def set_active(self, admin_id: str, user_id: str, is_active: bool) -> User:
        admin = self.get_by_id(admin_id)
        if admin.role != UserRole.ADMIN:
            raise ContractValidationError(
                f"User {admin_id} is not an admin",
                details={"role": admin.role.value},
            )
        user = self.get_by_id(user_id).model_copy(update={"is_active": is_active})
        self._users[user_id] = user
        logger.info(f"{admin.name} set user {user_id} active={is_active}")
        return user.model_copy()
