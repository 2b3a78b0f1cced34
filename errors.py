"""Exception hierarchy for Contract Guard.

Workflow and repository code raise these types; the CLI maps them to
console errors. Every raise happens before any mutation, so a caught
error means the collection is unchanged.

Usage:
    from errors import NotFoundError, InvalidTransitionError

    raise NotFoundError(resource="Contract", resource_id="CNT-2023-001")
    raise InvalidTransitionError("CNT-2023-001", "approve", "Approved", "contract is closed")
"""

from typing import Dict, Optional


class ContractGuardError(Exception):
    """Base class for all Contract Guard errors."""


class NotFoundError(ContractGuardError):
    """Raised when a contract or user id is absent from the collection.

    Args:
        resource: Human-readable entity name (e.g. "Contract", "User").
        resource_id: The id that was looked up.
    """

    def __init__(self, resource: str, resource_id: Optional[str] = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ContractValidationError(ContractGuardError):
    """Raised when a contract violates a business rule (e.g. incomplete submission).

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown. Keys are field names;
                 values are error descriptions.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None) -> None:
        self.details = details or {}
        super().__init__(message)


class InvalidTransitionError(ContractValidationError):
    """Raised when an action is not allowed for the actor or the contract's status."""

    def __init__(self, contract_id: str, action: str, current: str, reason: Optional[str] = None):
        msg = f"Cannot '{action}' contract {contract_id} (status={current})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.contract_id = contract_id
        self.action = action
        self.current_status = current
        self.reason = reason
