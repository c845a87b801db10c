"""
Pydantic models for launchkit configuration.

Two families of models live here:

- Tool settings (``AppSettings``): logging, cost tracker and snippet manager
  options. Loaded from defaults, an optional YAML file, env vars and CLI args.
- Cost tracker data (``TrackerConfig``): the user's JSON file describing
  providers, pricing rules and per-project usage. Keys stay camelCase on disk.
"""

from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ── Tool settings ────────────────────────────────────────────────────────────

DEFAULT_TRACKER_CONFIG = Path.home() / ".config" / "raycast" / "api-cost-tracker" / "config.json"
DEFAULT_STORAGE_DIR = Path.home() / "Library" / "Application Support" / "RaycastLearningSnippets"
DEFAULT_FALLBACK_DIR = Path.home() / ".raycast-learning-snippets"


class LoggingConfig(BaseModel):
    """Logging system configuration."""

    level: Literal["debug", "info", "human", "warn", "error"] = "human"
    file: Path | None = None
    verbose: int = 0

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: object) -> object:
        """Accept any casing and the stdlib spelling `warning` for `warn`."""
        if isinstance(v, str):
            v = v.lower()
            return "warn" if v == "warning" else v
        return v

    model_config = {"extra": "forbid"}


class CostsSettings(BaseModel):
    """Options for the API cost tracker."""

    config_path: Path = DEFAULT_TRACKER_CONFIG
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for a pricing page before using the fallback price",
    )
    max_redirects: int = Field(default=3, ge=0)

    model_config = {"extra": "forbid"}


class SnippetsSettings(BaseModel):
    """Options for the learning snippet manager."""

    storage_dir: Path = DEFAULT_STORAGE_DIR
    fallback_dir: Path = DEFAULT_FALLBACK_DIR
    notebook: str | None = Field(
        default=None,
        description="Markdown notebook file or folder; relative paths are resolved against $HOME",
    )
    clipboard_read: list[str] = Field(default_factory=lambda: ["pbpaste"])
    clipboard_write: list[str] = Field(default_factory=lambda: ["pbcopy"])

    model_config = {"extra": "forbid"}


class AppSettings(BaseModel):
    """Root settings object shared by both commands."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    costs: CostsSettings = Field(default_factory=CostsSettings)
    snippets: SnippetsSettings = Field(default_factory=SnippetsSettings)

    model_config = {"extra": "forbid"}


# ── Cost tracker data ────────────────────────────────────────────────────────


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ManualPricing(_CamelModel):
    """Fixed price per unit, entered by hand."""

    type: Literal["manual"] = "manual"
    price: float | None = None
    unit: str = "call"
    note: str | None = None


class WebPricing(_CamelModel):
    """Price scraped from a web page with a regex (first capture group)."""

    type: Literal["web"]
    url: str | None = None
    regex: str | None = None
    fallback_price: float | None = Field(default=None, alias="fallbackPrice")
    price: float | None = None
    unit: str = "call"
    note: str | None = None


Pricing = Annotated[Union[ManualPricing, WebPricing], Field(discriminator="type")]


class Optimization(_CamelModel):
    """Hint that part of a provider's workload could run on a cheaper one."""

    alternative: str | None = None
    eligible_usage_ratio: float = Field(default=0.0, ge=0.0, le=1.0, alias="eligibleUsageRatio")
    note: str | None = None


class Provider(_CamelModel):
    display_name: str | None = Field(default=None, alias="displayName")
    pricing: Pricing | None = None
    monthly_budget: float | None = Field(default=None, alias="monthlyBudget")
    optimization: Optimization | None = None


class Usage(_CamelModel):
    """Usage counters. Fields stay ``None`` when absent from the file."""

    calls: float | None = None
    tokens: float | None = None


class Threshold(_CamelModel):
    monthly_budget: float | None = Field(default=None, alias="monthlyBudget")


class Project(_CamelModel):
    name: str
    provider: str
    month_to_date: Usage = Field(default_factory=Usage, alias="monthToDate")
    recent_7_days: Usage | None = Field(default=None, alias="recent7Days")
    threshold: Threshold | None = None


class TrackerConfig(_CamelModel):
    """Contents of the cost tracker's JSON file. Read once per run."""

    currency: str = "$"
    overall_monthly_budget: float | None = Field(default=None, alias="overallMonthlyBudget")
    providers: dict[str, Provider] = Field(default_factory=dict)
    projects: list[Project] = Field(default_factory=list)
