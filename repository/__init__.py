"""Contract and user stores."""

from .base import ContractRepository, UserDirectory
from .memory import InMemoryContractRepository, InMemoryUserDirectory

__all__ = [
    "ContractRepository",
    "UserDirectory",
    "InMemoryContractRepository",
    "InMemoryUserDirectory",
]
