"""Process start-up: build a seeded in-memory workspace."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from contracts import utc_now
from providers import LLMProvider
from repository import InMemoryContractRepository, InMemoryUserDirectory
from workflow import WorkflowEngine
from assistant import ContractTextAssistant
from seed.fixtures import seed_contracts, seed_users


@dataclass
class Workspace:
    """Everything a front end needs to work with the register."""
    repository: InMemoryContractRepository
    users: InMemoryUserDirectory
    engine: WorkflowEngine
    assistant: ContractTextAssistant


def bootstrap(
    now: Optional[datetime] = None,
    provider: Optional[LLMProvider] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Workspace:
    """Seed users and contracts and wire the services together.

    Args:
        now: Reference time for fixture timestamps (UTC now when omitted)
        provider: Provider for the assistant (configured default when omitted)
        clock: Clock for the workflow engine (UTC now when omitted)
    """
    now = now or utc_now()
    repository = InMemoryContractRepository(seed_contracts(now))
    users = InMemoryUserDirectory(seed_users())
    engine = WorkflowEngine(repository, users, clock=clock)
    assistant = ContractTextAssistant(provider=provider)
    logger.info(f"Workspace ready: {len(repository)} contracts, {len(users.get_all())} users")
    return Workspace(repository=repository, users=users, engine=engine, assistant=assistant)
