"""Ratchet MCP tools for PointCare EMR.

This package provides the MCP tools an LLM agent uses to document home
health visits. All tools are async and render their results (or errors) as
text, so nothing raises across the protocol boundary.

Available Tools:
    - search_patient: Find patients by name, ID, or phone
    - get_patient_history: List a patient's previous visits
    - create_visit_note: Document a visit (vitals, SOAP note, education)

Usage:
    # Run as MCP server
    python -m ratchet

    # Or use the service layer directly
    from ratchet.context import RatchetContext
    from ratchet.config import RatchetConfig
    from ratchet.tools import PatientService, PatientSearchParams

    service = PatientService(RatchetContext(config=RatchetConfig()))
    result = await service.search_patients(PatientSearchParams(query="Eleanor"))
"""

from .dashboard import DashboardSync
from .mock_store import MockStore
from .schemas import (
    CreateVisitNoteParams,
    CreateVisitNoteResponse,
    Patient,
    PatientHistoryParams,
    PatientHistoryResponse,
    PatientSearchParams,
    PatientSearchResponse,
    PatientSearchResult,
    VisitNote,
    VisitNoteSummary,
    VisitStatus,
    VisitType,
    VitalSigns,
)
from .service import PatientService

__all__ = [
    # Service
    "PatientService",
    "MockStore",
    "DashboardSync",
    # Records
    "Patient",
    "PatientSearchResult",
    "VisitNote",
    "VisitNoteSummary",
    "VitalSigns",
    "VisitType",
    "VisitStatus",
    # Parameters
    "PatientSearchParams",
    "PatientHistoryParams",
    "CreateVisitNoteParams",
    # Responses
    "PatientSearchResponse",
    "PatientHistoryResponse",
    "CreateVisitNoteResponse",
]
