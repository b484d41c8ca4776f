"""Orchestration services for the business overview engine."""

from business_overview.core.services.automation_service import AutomationReportService
from business_overview.core.services.overview_service import BusinessOverviewService

__all__ = [
    "AutomationReportService",
    "BusinessOverviewService",
]
