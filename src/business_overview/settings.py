"""Service settings for the business overview engine."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the business overview service.

    Covers the two upstream collaborators (analytics provider and workflow
    automation platform), ROI constants, and overview assembly behaviour.
    """

    service_name: str = "business-overview"
    log_level: str = "INFO"
    log_format: str = "console"  # console | json

    # Upstream collaborator URLs
    analytics_base_url: str = "http://analytics-service:8080"
    workflow_base_url: str = "http://workflow-service:5678"
    analytics_enabled: bool = True
    workflow_enabled: bool = True
    analytics_property_id: str = "default"

    # Collaborator HTTP timeouts (seconds)
    collaborator_timeout_seconds: int = 30

    # Workflow event pagination
    event_page_size: int = 100
    max_events: int = 1000
    default_integration_id: str = "default"

    # ROI calculation defaults
    hourly_labor_cost_usd: float = 50.0  # Manual work replaced by automation
    monthly_automation_cost_usd: float = 100.0  # Per workflow per month

    # Overview assembly
    trend_lookback_days: int = 30
    compare_previous_period: bool = True
    fail_on_all_sources_unavailable: bool = False

    model_config = SettingsConfigDict(env_prefix="BUSINESS_OVERVIEW_")
