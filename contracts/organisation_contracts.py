"""Organisation contracts: legal entities, roles and users."""

from pydantic import BaseModel, Field
from enum import Enum


class Entity(str, Enum):
    """Legal/operational jurisdiction a contract or user belongs to."""
    LONDON = "London"
    BRAZIL = "Brazil"
    CONGO = "Congo"
    EQUATORIAL_GUINEA = "Equatorial Guinea"


class UserRole(str, Enum):
    """Role of a user in the approval chain."""
    SCM = "SCM"  # Supply chain; drafts and submits contracts
    CORPORATE_CFO = "Corporate CFO"
    CORPORATE_LEGAL = "Corporate Legal"
    CORPORATE_FUNCTION = "Corporate Function Head"
    CEO = "CEO"
    ADMIN = "Admin"
    # Ad-hoc reviewer roles
    ENGINEERING = "Engineering"
    HSE = "HSE"


class User(BaseModel):
    """A seeded user. Only `is_active` changes after start-up."""
    id: str = Field(..., min_length=1, description="Unique user id")
    name: str = Field(..., min_length=1, description="Display name")
    role: UserRole = Field(..., description="Role in the approval chain")
    entity: Entity = Field(..., description="Home entity")
    is_active: bool = Field(default=True, description="Inactive users cannot act on contracts")
