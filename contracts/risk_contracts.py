"""Risk contracts: trigger catalog entries and evaluation results."""

from pydantic import BaseModel, Field, model_validator
from typing import List
from enum import Enum


class RiskCategory(str, Enum):
    """Category of a risk trigger."""
    FINANCIAL = "Financial"
    LEGAL = "Legal"
    OPERATIONAL = "Operational"
    THIRD_PARTY = "Third Party"
    ENVIRONMENTAL = "Environmental"


class ContractType(str, Enum):
    """Spend classification of a contract."""
    CAPEX = "CAPEX"
    OPEX = "OPEX"


class RiskTrigger(BaseModel):
    """A risk flag. Catalog entries are untriggered; contracts carry triggered copies."""
    id: str = Field(..., description="Catalog id (t1..t11)")
    category: RiskCategory = Field(..., description="Risk category")
    description: str = Field(..., description="Human-readable trigger condition")
    triggered: bool = Field(default=False, description="Whether the trigger fired for this contract")


class RiskEvaluation(BaseModel):
    """Output of the risk trigger evaluator."""
    detected_triggers: List[RiskTrigger] = Field(default_factory=list)
    is_high_risk: bool = Field(default=False)

    @model_validator(mode='after')
    def sync_high_risk(self) -> 'RiskEvaluation':
        """High risk iff at least one trigger fired."""
        object.__setattr__(self, 'is_high_risk', len(self.detected_triggers) > 0)
        return self

    @property
    def trigger_ids(self) -> List[str]:
        return [t.id for t in self.detected_triggers]
