"""Demo fixtures and workspace bootstrap."""

from .fixtures import USERS, mock_contract, seed_contracts, seed_users
from .bootstrap import Workspace, bootstrap

__all__ = [
    "USERS",
    "mock_contract",
    "seed_contracts",
    "seed_users",
    "Workspace",
    "bootstrap",
]
