"""Helpers shared by the MCP tool adapters.

Adapters turn loose tool arguments into typed parameters and render service
results as plain text for the LLM. Nothing here raises past an adapter:
errors are rendered with :func:`error_result`.
"""

from __future__ import annotations

from typing import Any, TypeVar

from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError, format_error_for_mcp
from .schemas import VitalSigns

MOCK_BANNER = "⚠️ MOCK MODE: Using test data (PointCare API not connected)\n\n"

DEFAULT_LIMIT = 10
MAX_LIMIT = 50

ModelT = TypeVar("ModelT", bound=BaseModel)


def text_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


def error_result(error: BaseException | None) -> CallToolResult:
    return CallToolResult(content=[format_error_for_mcp(error)], isError=True)


def coerce_int(value: Any, default: int) -> int:
    """Best-effort int conversion; falsy or unparsable values give *default*."""
    if isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return default
    return number or default


def coerce_limit(value: Any) -> int:
    """Tool ``limit`` argument: default 10, capped at 50."""
    return min(max(coerce_int(value, DEFAULT_LIMIT), 1), MAX_LIMIT)


def coerce_offset(value: Any) -> int:
    return max(coerce_int(value, 0), 0)


def coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def parse_params(
    model: type[ModelT],
    data: dict[str, Any],
    required_messages: dict[str, str] | None = None,
) -> ModelT:
    """Validate tool arguments, reporting the first bad field as a ValidationError.

    Args:
        model: Parameter model to validate against.
        data: Coerced tool arguments (camelCase keys).
        required_messages: Message to use when a given field is missing,
            keyed by field alias. Other missing fields read "X is required".

    Raises:
        ValidationError: If any field is missing or invalid.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        if first.get("type") == "missing":
            message = (required_messages or {}).get(field or "", f"{field} is required")
        else:
            message = f"Invalid value for {field}: {first.get('msg', 'invalid input')}"
        raise ValidationError(message, field) from e


def format_number(value: float | int) -> str:
    """Render ``98.0`` as ``98`` and ``98.4`` as ``98.4``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_vitals(vitals: VitalSigns, indent: str = "  ") -> list[str]:
    """One bullet per recorded vital sign."""
    lines: list[str] = []
    n = format_number
    if vitals.blood_pressure_systolic and vitals.blood_pressure_diastolic:
        lines.append(
            f"{indent}• BP: {n(vitals.blood_pressure_systolic)}/"
            f"{n(vitals.blood_pressure_diastolic)} mmHg"
        )
    if vitals.heart_rate:
        lines.append(f"{indent}• HR: {n(vitals.heart_rate)} bpm")
    if vitals.respiratory_rate:
        lines.append(f"{indent}• RR: {n(vitals.respiratory_rate)} breaths/min")
    if vitals.temperature:
        lines.append(f"{indent}• Temp: {n(vitals.temperature)}°{vitals.temperature_unit or 'F'}")
    if vitals.oxygen_saturation:
        lines.append(f"{indent}• O2 Sat: {n(vitals.oxygen_saturation)}%")
    if vitals.weight:
        lines.append(f"{indent}• Weight: {n(vitals.weight)} {vitals.weight_unit or 'lbs'}")
    if vitals.pain_level is not None:
        lines.append(f"{indent}• Pain: {vitals.pain_level}/10")
    return lines
