"""get_patient_history tool: list a patient's previous visits."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp.types import CallToolResult, Tool

from .formatting import (
    MOCK_BANNER,
    coerce_limit,
    coerce_offset,
    coerce_str,
    error_result,
    parse_params,
    text_result,
)
from .schemas import PatientHistoryParams, PatientHistoryResponse, VisitStatus
from .service import PatientService

if TYPE_CHECKING:
    from ..context import RatchetContext

logger = logging.getLogger(__name__)

TOOL = Tool(
    name="get_patient_history",
    description=(
        "Retrieve visit history for a patient from the PointCare EMR system.\n\n"
        "Returns a list of previous visits with dates, types, and key information. "
        "Use this to review patient history before creating a new visit note.\n\n"
        "Use search_patient first to get the patient ID."
    ),
    inputSchema=PatientHistoryParams.model_json_schema(),
)


def build_params(args: dict[str, Any]) -> PatientHistoryParams:
    data: dict[str, Any] = {
        "patientId": coerce_str(args.get("patientId")),
        "limit": coerce_limit(args.get("limit")),
        "offset": coerce_offset(args.get("offset")),
    }
    for key in ("startDate", "endDate", "visitType"):
        if args.get(key):
            data[key] = args[key]
    return parse_params(PatientHistoryParams, data)


def render(params: PatientHistoryParams, response: PatientHistoryResponse, mock_mode: bool) -> str:
    lines = [f"**Visit History for {response.patient_name}** ({response.patient_id})", ""]

    if not response.visits:
        lines.append("_No visits found for the specified criteria._")
        if params.start_date or params.end_date or params.visit_type:
            lines.append("")
            lines.append("Filters applied:")
            if params.start_date:
                lines.append(f"  • From: {params.start_date}")
            if params.end_date:
                lines.append(f"  • To: {params.end_date}")
            if params.visit_type:
                lines.append(f"  • Type: {params.visit_type.label}")
    else:
        lines.append(f"Showing {len(response.visits)} of {response.total} visit(s):")
        lines.append("")
        for visit in response.visits:
            icon = "✅" if visit.status is VisitStatus.COMPLETED else "⏳"
            lines.append(f"{icon} **{visit.visit_date}** - {visit.visit_type.label}")
            lines.append(f"   • Duration: {visit.duration} min | Nurse: {visit.nurse_name}")
            if visit.has_vitals:
                lines.append("   • Vitals recorded")
            lines.append("")

        if response.has_more:
            lines.append(
                f"_Showing {len(response.visits)} of {response.total} visits. "
                "Use limit parameter to see more._"
            )

    text = "\n".join(lines)
    return MOCK_BANNER + text if mock_mode else text


async def execute(args: dict[str, Any], context: RatchetContext) -> CallToolResult:
    """Execute the get_patient_history tool."""
    try:
        params = build_params(args)
        response = await PatientService(context).get_patient_history(params)
        return text_result(render(params, response, context.mock_mode))
    except Exception as e:
        logger.error("get_patient_history failed", extra={"data": {"error": type(e).__name__}})
        return error_result(e)
