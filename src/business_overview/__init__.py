"""Business overview engine: KPIs, health scoring, trends and automation reporting."""

__version__ = "0.1.0"
