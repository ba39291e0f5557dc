"""search_patient tool: find patients by name, ID, or phone number."""

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
from .schemas import PatientSearchParams, PatientSearchResponse
from .service import PatientService

if TYPE_CHECKING:
    from ..context import RatchetContext

logger = logging.getLogger(__name__)

TOOL = Tool(
    name="search_patient",
    description=(
        "Search for a patient in the PointCare EMR system by name, ID, or phone number.\n\n"
        "Returns matching patient records with basic information. Use this tool to find "
        "patients before creating visit notes or retrieving history.\n\n"
        "Examples:\n"
        '- Search by name: "Eleanor Thompson"\n'
        '- Search by ID: "PT-10001"\n'
        '- Search by phone: "555-0101"'
    ),
    inputSchema=PatientSearchParams.model_json_schema(),
)


def build_params(args: dict[str, Any]) -> PatientSearchParams:
    """Coerce raw tool arguments into search parameters."""
    data: dict[str, Any] = {
        "query": coerce_str(args.get("query")),
        "limit": coerce_limit(args.get("limit")),
        "offset": coerce_offset(args.get("offset")),
    }
    for key in ("searchType", "status"):
        if args.get(key):
            data[key] = args[key]
    return parse_params(PatientSearchParams, data)


def render(params: PatientSearchParams, response: PatientSearchResponse, mock_mode: bool) -> str:
    lines: list[str] = []

    if not response.results:
        lines.append(f'No patients found matching "{params.query}"')
    else:
        lines.append(f'Found {response.total} patient(s) matching "{params.query}":')
        lines.append("")
        for patient in response.results:
            lines.append(f"**{patient.first_name} {patient.last_name}** ({patient.id})")
            lines.append(f"  • DOB: {patient.date_of_birth}")
            if patient.phone:
                lines.append(f"  • Phone: {patient.phone}")
            lines.append(f"  • Status: {patient.status}")
            if patient.primary_diagnosis:
                lines.append(f"  • Primary Dx: {patient.primary_diagnosis}")
            lines.append("")

        if response.has_more:
            lines.append(f"_Showing {len(response.results)} of {response.total} results_")

    text = "\n".join(lines)
    return MOCK_BANNER + text if mock_mode else text


async def execute(args: dict[str, Any], context: RatchetContext) -> CallToolResult:
    """Execute the search_patient tool."""
    try:
        params = build_params(args)
        response = await PatientService(context).search_patients(params)
        return text_result(render(params, response, context.mock_mode))
    except Exception as e:
        logger.error("search_patient failed", extra={"data": {"error": type(e).__name__}})
        return error_result(e)
