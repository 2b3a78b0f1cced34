"""Fixed risk trigger catalog.

t1 and t2 are computed from amount and contract type. t3..t11 are
checklist flags that only fire when a reviewer confirms them.
"""

from typing import Dict, List

from contracts import RiskCategory, RiskTrigger


OPEX_OVER_1M = "t1"
CAPEX_OVER_5M = "t2"
LIABILITY_CAP_BELOW_100 = "t3"
FIXED_TERM_OVER_3_YEARS = "t4"
SUBCONTRACTING_OVER_30 = "t5"

TRIGGER_CATALOG: List[RiskTrigger] = [
    # Auto-detected
    RiskTrigger(id=OPEX_OVER_1M, category=RiskCategory.FINANCIAL, description="OPEX > USD 1M"),
    RiskTrigger(id=CAPEX_OVER_5M, category=RiskCategory.FINANCIAL, description="CAPEX > USD 5M"),
    # Checklist
    RiskTrigger(id=LIABILITY_CAP_BELOW_100, category=RiskCategory.LEGAL, description="Liability cap < 100% contract value"),
    RiskTrigger(id=FIXED_TERM_OVER_3_YEARS, category=RiskCategory.OPERATIONAL, description="Contract > 3 years fixed"),
    RiskTrigger(id=SUBCONTRACTING_OVER_30, category=RiskCategory.THIRD_PARTY, description="Subcontracting > 30% of scope"),
    RiskTrigger(id="t6", category=RiskCategory.THIRD_PARTY, description="Sole Source Supplier"),
    RiskTrigger(id="t7", category=RiskCategory.ENVIRONMENTAL, description="Work involving hazardous materials"),
    RiskTrigger(id="t8", category=RiskCategory.OPERATIONAL, description="Work in conflict zone / high security risk"),
    RiskTrigger(id="t9", category=RiskCategory.LEGAL, description="High risk of IP infringement"),
    RiskTrigger(id="t10", category=RiskCategory.FINANCIAL, description="Payment terms deviate from standard policy"),
    RiskTrigger(id="t11", category=RiskCategory.ENVIRONMENTAL, description="Significant environmental impact potential"),
]

AUTO_TRIGGER_IDS = frozenset({OPEX_OVER_1M, CAPEX_OVER_5M})
CHECKLIST_TRIGGER_IDS = frozenset(t.id for t in TRIGGER_CATALOG) - AUTO_TRIGGER_IDS

_BY_ID: Dict[str, RiskTrigger] = {t.id: t for t in TRIGGER_CATALOG}


def get_trigger(trigger_id: str) -> RiskTrigger:
    """Look up a catalog definition.

    Raises:
        KeyError: If the id is not in the catalog
    """
    return _BY_ID[trigger_id]


def is_checklist_trigger(trigger_id: str) -> bool:
    return trigger_id in CHECKLIST_TRIGGER_IDS
