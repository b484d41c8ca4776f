"""Validation and normalization of raw workflow execution event payloads.

The workflow platform delivers events either in the engine's own camelCase
shape (``workflowId``, ``executionId``, ``startTime`` ...) or in the
platform's native webhook shape (``ExecutionID``, ``Status``, ``Timestamp``).
Both are normalized into immutable ExecutionEvent records.

Key invariants:
  - Native payloads are always accepted; unknown native statuses map to completed.
  - Duration is derived as end_time - start_time when absent and an end time exists.
  - created_at defaults to start_time when the payload carries no creation timestamp.
  - parse_execution_events() never raises; invalid payloads are skipped and logged.
  - Payloads that are not JSON objects, or whose inputData / outputData /
    metadata are not objects, are invalid.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from business_overview.core.models import EVENT_TYPES, EXECUTION_STATES, ExecutionEvent
from business_overview.errors import EventValidationError
from business_overview.observability import get_logger

logger = get_logger(__name__)

_NATIVE_STATUS_MAP: dict[str, str] = {
    "success": "completed",
    "failed": "failed",
    "running": "running",
    "waiting": "waiting",
    "cancelled": "cancelled",
}

_REQUIRED_FIELDS: tuple[str, ...] = ("workflowId", "workflowName", "executionId")
_OBJECT_FIELDS: tuple[str, ...] = ("inputData", "outputData", "metadata")


@dataclass
class EventValidationResult:
    """Outcome of validating one event payload.

    Attributes:
        is_valid: True when the payload produced an event.
        errors: Blocking validation failures.
        warnings: Non-blocking observations (missing optional fields, conversions).
        event: The normalized event when valid.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    event: ExecutionEvent | None = None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 string (or pass through a datetime) as an aware UTC datetime.

    Returns:
        The parsed datetime, or None when the value is missing or malformed.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_native_payload(payload: Mapping[str, Any]) -> bool:
    """True when the payload uses the platform's native webhook keys."""
    return bool(payload.get("ExecutionID") and payload.get("Status") and payload.get("Timestamp"))


def validate_event_payload(payload: Any) -> EventValidationResult:
    """Validate a raw event payload and normalize it into an ExecutionEvent.

    Args:
        payload: Decoded JSON value received from the workflow platform.

    Returns:
        EventValidationResult with errors, warnings and the parsed event.
    """
    if not isinstance(payload, Mapping):
        return EventValidationResult(
            is_valid=False,
            errors=[f"Payload must be a JSON object, got {type(payload).__name__}"],
        )

    if is_native_payload(payload):
        event = _convert_native_payload(payload)
        if event is None:
            return EventValidationResult(
                is_valid=False,
                errors=["Timestamp has an invalid format (must be ISO 8601)"],
            )
        return EventValidationResult(
            is_valid=True,
            warnings=["Payload converted from native format"],
            event=event,
        )

    errors: list[str] = []
    warnings: list[str] = []

    for name in _REQUIRED_FIELDS:
        if not payload.get(name):
            errors.append(f"{name} is required")

    event_type = payload.get("eventType")
    if not event_type:
        errors.append("eventType is required")
    elif event_type not in EVENT_TYPES:
        errors.append(f"Invalid eventType: {event_type}")

    status = payload.get("status")
    if not status:
        errors.append("status is required")
    elif status not in EXECUTION_STATES:
        errors.append(f"Invalid status: {status}")

    start_time = parse_timestamp(payload.get("startTime"))
    if not payload.get("startTime"):
        errors.append("startTime is required")
    elif start_time is None:
        errors.append("Invalid startTime format (must be ISO 8601)")

    end_time = parse_timestamp(payload.get("endTime"))
    if payload.get("endTime") and end_time is None:
        errors.append("Invalid endTime format (must be ISO 8601)")

    if not payload.get("inputData"):
        warnings.append("inputData is missing (optional but recommended)")
    if not payload.get("outputData"):
        warnings.append("outputData is missing (optional but recommended)")
    for name in _OBJECT_FIELDS:
        value = payload.get(name)
        if value and not isinstance(value, Mapping):
            errors.append(f"{name} must be an object")

    if errors or start_time is None:
        return EventValidationResult(is_valid=False, errors=errors, warnings=warnings)

    duration_ms = _coerce_duration(payload.get("duration"))
    if duration_ms is None and end_time is not None:
        duration_ms = max(0.0, (end_time - start_time).total_seconds() * 1000)

    created_at = parse_timestamp(payload.get("createdAt")) or start_time
    execution_id = str(payload["executionId"])

    event = ExecutionEvent(
        id=str(payload.get("id") or f"{execution_id}:{event_type}"),
        workflow_id=str(payload["workflowId"]),
        workflow_name=str(payload["workflowName"]),
        execution_id=execution_id,
        event_type=event_type,
        status=status,
        start_time=start_time,
        created_at=created_at,
        end_time=end_time,
        duration_ms=duration_ms,
        input_data=dict(payload.get("inputData") or {}),
        output_data=dict(payload.get("outputData") or {}),
        error_message=payload.get("errorMessage"),
        metadata=dict(payload.get("metadata") or {}),
    )
    return EventValidationResult(is_valid=True, warnings=warnings, event=event)


def parse_execution_event(payload: Mapping[str, Any]) -> ExecutionEvent:
    """Parse a single payload, raising when it is invalid.

    Raises:
        EventValidationError: If the payload fails validation.
    """
    result = validate_event_payload(payload)
    if result.event is None:
        raise EventValidationError(result.errors)
    return result.event


def parse_execution_events(payloads: Iterable[Any]) -> list[ExecutionEvent]:
    """Parse a batch of payloads, skipping the invalid ones.

    Args:
        payloads: Raw event payloads in delivery order.

    Returns:
        Parsed events in the same order, invalid payloads omitted.
    """
    events: list[ExecutionEvent] = []
    skipped = 0
    for payload in payloads:
        result = validate_event_payload(payload)
        if result.event is None:
            skipped += 1
            execution_id = None
            if isinstance(payload, Mapping):
                execution_id = payload.get("executionId") or payload.get("ExecutionID")
            logger.warning("execution_event_skipped", execution_id=execution_id, errors=result.errors)
            continue
        events.append(result.event)

    if skipped:
        logger.info("execution_events_parsed", parsed=len(events), skipped=skipped)
    return events


def _coerce_duration(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        duration = float(value)
    except (TypeError, ValueError):
        return None
    return duration if duration >= 0 else None


def _convert_native_payload(payload: Mapping[str, Any]) -> ExecutionEvent | None:
    """Map a native platform webhook payload onto an ExecutionEvent."""
    timestamp = parse_timestamp(payload.get("Timestamp"))
    if timestamp is None:
        return None

    execution_id = str(payload["ExecutionID"])
    native_status = str(payload["Status"])
    status = _NATIVE_STATUS_MAP.get(native_status.lower(), "completed")

    return ExecutionEvent(
        id=f"{execution_id}:workflow_completed",
        workflow_id=str(payload.get("WorkflowID") or f"workflow-{execution_id}"),
        workflow_name=str(payload.get("WorkflowName") or "Unnamed Workflow"),
        execution_id=execution_id,
        event_type="workflow_completed",
        status=status,
        start_time=timestamp,
        created_at=timestamp,
        input_data=dict(payload),
        output_data={
            "executionId": execution_id,
            "status": native_status,
            "timestamp": payload.get("Timestamp"),
        },
    )
