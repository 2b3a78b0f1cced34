"""Configuration settings for Contract Guard."""

# Load .env into os.environ so provider fallbacks (e.g. GOOGLE_API_KEY) work
from dotenv import load_dotenv
load_dotenv()

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    """Global settings for Contract Guard.

    Settings can be overridden via environment variables with CONTRACT_GUARD_ prefix.
    Example: CONTRACT_GUARD_CEO_ESCALATION_THRESHOLD=10000000
    """

    # Classification and risk thresholds (USD)
    capex_classification_threshold: float = Field(
        default=5_000_000,
        ge=0,
        description="Amounts above this are classified CAPEX when no type is given"
    )
    opex_high_risk_threshold: float = Field(
        default=1_000_000,
        ge=0,
        description="OPEX contracts above this fire the 'OPEX > USD 1M' trigger"
    )
    capex_high_risk_threshold: float = Field(
        default=5_000_000,
        ge=0,
        description="CAPEX contracts above this fire the 'CAPEX > USD 5M' trigger"
    )
    ceo_escalation_threshold: float = Field(
        default=5_000_000,
        ge=0,
        description="Approved contracts above this go to the CEO even when not high-risk"
    )

    # Checklist hints
    liability_cap_floor_percent: float = Field(
        default=100.0,
        description="Liability caps below this suggest the liability checklist flag"
    )
    max_fixed_term_years: float = Field(
        default=3.0,
        description="Fixed terms longer than this suggest the duration checklist flag"
    )
    max_subcontracting_percent: float = Field(
        default=30.0,
        description="Subcontracting above this suggests the third-party checklist flag"
    )

    # Register paging
    default_page_size: int = Field(
        default=25,
        ge=1,
        description="Rows per register page"
    )
    page_size_options: List[int] = Field(
        default_factory=lambda: [25, 50, 100],
        description="Page sizes offered to users"
    )
    max_page_size: int = Field(
        default=500,
        ge=1,
        description="Upper clamp for requested page sizes"
    )

    default_currency: str = Field(
        default="USD",
        description="Currency for new drafts"
    )

    # AI assistant (env: CONTRACT_GUARD_<KEY> or standard env var)
    ai_provider: str = Field(
        default="gemini",
        description="Provider for the text assistant (gemini, litellm)"
    )
    ai_model: str = Field(
        default="gemini-2.5-flash",
        description="Model used for risk summaries and rewrites"
    )
    google_api_key: str = Field(
        default="",
        description="Google/Gemini API key (env: CONTRACT_GUARD_GOOGLE_API_KEY)",
    )
    ai_max_output_tokens: int = Field(
        default=1024,
        ge=1,
        description="Maximum tokens per assistant response"
    )

    log_level: str = Field(
        default="INFO",
        description="Loguru level for the CLI sink"
    )

    model_config = {
        "env_prefix": "CONTRACT_GUARD_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",  # ignore extra env vars (e.g. GOOGLE_API_KEY) not in schema
    }

    def clamp_page_size(self, page_size: int) -> int:
        """Clamp a requested page size to [1, max_page_size]."""
        return max(1, min(int(page_size), self.max_page_size))


# Create singleton instance
settings = Settings()
