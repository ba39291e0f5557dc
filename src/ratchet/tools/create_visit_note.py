"""create_visit_note tool: document a home health visit in PointCare."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp.types import CallToolResult, Tool

from .formatting import MOCK_BANNER, coerce_str, error_result, format_vitals, parse_params, text_result
from .schemas import CreateVisitNoteParams, CreateVisitNoteResponse
from .service import PatientService

if TYPE_CHECKING:
    from ..context import RatchetContext

logger = logging.getLogger(__name__)

TOOL = Tool(
    name="create_visit_note",
    description=(
        "Create a visit note for a patient in the PointCare EMR system.\n\n"
        "This tool documents a home health visit including vital signs, assessment, "
        "and care plan. Use search_patient first to get the patient ID.\n\n"
        "Required fields: patientId, visitType, visitDate, timeIn, timeOut\n"
        "Recommended fields: vitalSigns, subjective, objective, assessment, plan"
    ),
    inputSchema=CreateVisitNoteParams.model_json_schema(),
)


def build_params(args: dict[str, Any]) -> CreateVisitNoteParams:
    """Coerce raw tool arguments; absent optional fields stay unset."""
    data = {key: value for key, value in args.items() if value is not None}
    for key in ("patientId", "visitDate", "timeIn", "timeOut"):
        data[key] = coerce_str(args.get(key))
    if not data.get("visitType"):
        data.pop("visitType", None)
    return parse_params(
        CreateVisitNoteParams, data, {"visitType": "Visit type is required"}
    )


def render(
    params: CreateVisitNoteParams, response: CreateVisitNoteResponse, mock_mode: bool
) -> str:
    lines: list[str] = []

    if response.success:
        lines.append("✅ **Visit Note Created Successfully**")
        lines.append("")
        lines.append(f"• Note ID: {response.visit_note_id}")
        lines.append(f"• Patient: {params.patient_id}")
        lines.append(f"• Visit Type: {params.visit_type.value}")
        lines.append(f"• Date: {params.visit_date}")
        lines.append(f"• Time: {params.time_in} - {params.time_out}")
        if response.visit_note is not None and response.visit_note.duration:
            lines.append(f"• Duration: {response.visit_note.duration} minutes")

        if params.vital_signs is not None:
            vitals = format_vitals(params.vital_signs)
            if vitals:
                lines.append("")
                lines.append("**Vital Signs Recorded:**")
                lines.extend(vitals)

        if params.next_visit_date:
            lines.append("")
            lines.append(f"📅 Next visit scheduled: {params.next_visit_date}")
    else:
        lines.append("❌ **Failed to Create Visit Note**")
        lines.append("")
        lines.append(response.message)

    text = "\n".join(lines) + "\n"
    return MOCK_BANNER + text if mock_mode else text


async def execute(args: dict[str, Any], context: RatchetContext) -> CallToolResult:
    """Execute the create_visit_note tool."""
    try:
        params = build_params(args)
        response = await PatientService(context).create_visit_note(params)
        return text_result(render(params, response, context.mock_mode))
    except Exception as e:
        logger.error("create_visit_note failed", extra={"data": {"error": type(e).__name__}})
        return error_result(e)
