"""Prompt text for the contract text assistant."""

from enum import Enum

from contracts import Contract


class RefineContext(str, Enum):
    """Which narrative field a rewrite is for."""
    SCOPE = "scope"
    BACKGROUND = "background"

    @property
    def label(self) -> str:
        if self == RefineContext.SCOPE:
            return "Scope of Work Description"
        return "Executive Business Case/Background"


RISK_ANALYST_PROMPT = """You are a legal and risk expert for an oil and gas company.
Analyze the contract summary you are given and provide a concise 3-bullet point executive risk assessment for the CEO.
Focus on financial exposure, operational criticality, and potential gaps in mitigation.

Output format:
- [Risk Level: Low/Medium/High]: Summary sentence...
- Key Concern 1...
- Key Concern 2...
- (Optional) Mitigation Gaps...
"""

CONTRACT_EDITOR_PROMPT = """You are a senior contract administrator in the Oil & Gas industry.
Rewrite the rough text you are given to be professional, precise, and legally sound.

Rules:
- Improve clarity and professional tone.
- Fix grammar.
- Keep it concise but detailed enough for a legal contract.
- Do not add made-up details, just refine what is there.
- Return ONLY the rewritten text, no conversational filler.
"""


def _or_none(value) -> str:
    return str(value) if value not in (None, "") else "None"


def risk_summary_message(contract: Contract) -> str:
    """Contract facts handed to the risk analyst."""
    triggers = ", ".join(t.description for t in contract.detected_triggers) or "None"
    return f"""Contract Title: {contract.contractor_name}
Scope: {contract.scope_of_work}
Amount: {contract.currency} {contract.amount:,.0f}
Duration: {_or_none(contract.start_date)} to {_or_none(contract.end_date)}
Liability Cap: {contract.liability_cap_percent:g}%

Evaluation Context:
- Technical: {contract.technical_eval_summary}
- Commercial: {contract.commercial_eval_summary}
- Tender Process: {contract.tender_process_summary}

Risk Profile:
- Deviations: {_or_none(contract.deviations_description)}
- Subcontracting: {contract.subcontracting_percent:g}%
- Risk Triggers: {triggers}
- Identified Risks: {contract.risk_description}
- Mitigations: {contract.mitigation_measures}
"""


def refine_message(text: str, context: RefineContext) -> str:
    return f'Context: {context.label}\nInput Text: "{text}"'
