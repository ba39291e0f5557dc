"""Patient service: business logic for patient and visit operations.

In mock mode every operation runs against the context's ``MockStore``.
The live PointCare API is not integrated yet; outside mock mode each
operation raises ``NotImplementedError``.
"""

from __future__ import annotations

import logging
import re
import time
from typing import TYPE_CHECKING

from ..errors import NotFoundError, ValidationError
from ..logger import audit
from .mock_store import current_timestamp
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
)

if TYPE_CHECKING:
    from ..context import RatchetContext

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10

# Signer identity until auth context is available
CURRENT_NURSE_ID = "RN-CURRENT"
CURRENT_NURSE_NAME = "Current User, RN"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_NON_DIGIT_RE = re.compile(r"\D")


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _digits(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value)


def parse_minutes(value: str, field: str) -> int:
    """Convert ``HH:MM`` (24-hour) to minutes since midnight."""
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValidationError(f"{field} must be in HH:MM format", field)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"{field} must be in HH:MM format", field)
    return hours * 60 + minutes


def calculate_duration(time_in: str, time_out: str) -> int:
    """Visit length in minutes; a time-out before time-in yields 0."""
    duration = parse_minutes(time_out, "timeOut") - parse_minutes(time_in, "timeIn")
    return max(duration, 0)


def _page(total: int, offset: int, returned: int) -> bool:
    """Whether matches remain past the returned slice."""
    return offset + returned < total


class PatientService:
    """Search, fetch, history and visit-note creation."""

    def __init__(self, context: RatchetContext):
        self.context = context

    @property
    def store(self):
        return self.context.store

    def _require_mock(self) -> None:
        if not self.context.mock_mode:
            # TODO: call the PointCare API client once its contract is published
            raise NotImplementedError("Real API not yet implemented")

    # ------------------------------------------------------------------
    # search_patients
    # ------------------------------------------------------------------

    async def search_patients(self, params: PatientSearchParams) -> PatientSearchResponse:
        """Search patients by name, id or phone.

        Name and id match on a case-insensitive substring. Phone matching
        compares digits only, so ``5550101`` finds ``555-0101``. ``all``
        accepts a patient matching on any of the three.

        Args:
            params: Query, search type, optional status filter and paging

        Returns:
            PatientSearchResponse with the page of matches and the total

        Raises:
            ValidationError: If the query is empty or whitespace
        """
        start = time.perf_counter()
        logger.info(
            "Searching patients",
            extra={"data": {"searchType": params.search_type, "hasQuery": bool(params.query)}},
        )

        if _is_blank(params.query):
            raise ValidationError("Search query is required", "query")

        self._require_mock()

        query = params.query.strip().lower()
        query_digits = _digits(query)
        limit = params.limit or DEFAULT_LIMIT
        offset = max(params.offset, 0)

        def matches(patient: Patient) -> bool:
            if params.status and patient.status != params.status:
                return False

            full_name = patient.demographics.full_name.lower()
            patient_id = patient.id.id.lower()
            phone = _digits(patient.contact.phone or "")
            # A query without digits would otherwise match every phone
            phone_match = bool(query_digits) and query_digits in phone

            if params.search_type == "name":
                return query in full_name
            if params.search_type == "id":
                return query in patient_id
            if params.search_type == "phone":
                return phone_match
            return query in full_name or query in patient_id or phone_match

        filtered = [p for p in self.store.patients if matches(p)]
        total = len(filtered)
        results = [
            PatientSearchResult.from_patient(p) for p in filtered[offset : offset + limit]
        ]

        audit("search_patient", True, _elapsed_ms(start))

        return PatientSearchResponse(
            results=results,
            total=total,
            limit=limit,
            offset=offset,
            has_more=_page(total, offset, len(results)),
        )

    # ------------------------------------------------------------------
    # get_patient
    # ------------------------------------------------------------------

    async def get_patient(self, patient_id: str) -> Patient:
        """Fetch one full patient record.

        Raises:
            ValidationError: If ``patient_id`` is empty
            NotFoundError: If no patient has that id
        """
        start = time.perf_counter()
        logger.info("Getting patient", extra={"data": {"hasPatientId": bool(patient_id)}})

        if _is_blank(patient_id):
            raise ValidationError("Patient ID is required", "patientId")

        self._require_mock()

        patient = self.store.find_patient(patient_id)
        if patient is None:
            audit("get_patient", False, _elapsed_ms(start))
            raise NotFoundError("Patient")

        audit("get_patient", True, _elapsed_ms(start))
        return patient

    # ------------------------------------------------------------------
    # get_patient_history
    # ------------------------------------------------------------------

    async def get_patient_history(self, params: PatientHistoryParams) -> PatientHistoryResponse:
        """Visit history for one patient, most recent first.

        Date bounds are inclusive and compared as ISO date strings.

        Args:
            params: Patient id plus optional date range, visit type and paging

        Returns:
            PatientHistoryResponse, most recent visit first

        Raises:
            ValidationError: If the patient id is empty
            NotFoundError: If the patient does not exist
        """
        start = time.perf_counter()
        logger.info(
            "Getting patient history",
            extra={"data": {"hasPatientId": bool(params.patient_id)}},
        )

        if _is_blank(params.patient_id):
            raise ValidationError("Patient ID is required", "patientId")

        self._require_mock()

        patient = self.store.find_patient(params.patient_id)
        if patient is None:
            audit("get_patient_history", False, _elapsed_ms(start))
            raise NotFoundError("Patient")

        limit = params.limit or DEFAULT_LIMIT
        offset = max(params.offset, 0)

        visits = self.store.visits_for_patient(params.patient_id)
        if params.start_date:
            visits = [v for v in visits if v.visit_date >= params.start_date]
        if params.end_date:
            visits = [v for v in visits if v.visit_date <= params.end_date]
        if params.visit_type:
            visits = [v for v in visits if v.visit_type == params.visit_type]

        visits.sort(key=lambda v: v.visit_date, reverse=True)

        total = len(visits)
        page = visits[offset : offset + limit]

        audit("get_patient_history", True, _elapsed_ms(start))

        return PatientHistoryResponse(
            patient_id=params.patient_id,
            patient_name=patient.demographics.full_name,
            visits=[VisitNoteSummary.from_visit(v) for v in page],
            total=total,
            limit=limit,
            offset=offset,
            has_more=_page(total, offset, len(page)),
        )

    # ------------------------------------------------------------------
    # create_visit_note
    # ------------------------------------------------------------------

    async def create_visit_note(self, params: CreateVisitNoteParams) -> CreateVisitNoteResponse:
        """Document a visit and append it to the patient's history.

        The dashboard sync is handed off in the background; its outcome never
        affects the result returned here.

        Args:
            params: Visit details; patientId, visitType, visitDate, timeIn
                and timeOut are required

        Returns:
            CreateVisitNoteResponse embedding the stored VisitNote

        Raises:
            ValidationError: If a required field is missing or a time is
                not HH:MM
            NotFoundError: If the patient does not exist
        """
        start = time.perf_counter()
        logger.info(
            "Creating visit note",
            extra={
                "data": {
                    "hasPatientId": bool(params.patient_id),
                    "visitType": params.visit_type.value if params.visit_type else None,
                }
            },
        )

        if _is_blank(params.patient_id):
            raise ValidationError("Patient ID is required", "patientId")
        if not params.visit_type:
            raise ValidationError("Visit type is required", "visitType")
        if _is_blank(params.visit_date):
            raise ValidationError("Visit date is required", "visitDate")
        if _is_blank(params.time_in):
            raise ValidationError("Time in is required", "timeIn")
        if _is_blank(params.time_out):
            raise ValidationError("Time out is required", "timeOut")

        self._require_mock()

        if self.store.find_patient(params.patient_id) is None:
            audit("create_visit_note", False, _elapsed_ms(start))
            raise NotFoundError("Patient")

        duration = calculate_duration(params.time_in, params.time_out)
        now = current_timestamp()

        visit = VisitNote(
            id=self.store.next_visit_id(),
            patient_id=params.patient_id,
            visit_type=params.visit_type,
            status=VisitStatus.COMPLETED,
            visit_date=params.visit_date,
            time_in=params.time_in,
            time_out=params.time_out,
            duration=duration,
            vital_signs=params.vital_signs,
            subjective=params.subjective,
            objective=params.objective,
            assessment=params.assessment,
            plan=params.plan,
            interventions=params.interventions,
            patient_response=params.patient_response,
            education=params.education,
            notes=params.notes,
            next_visit_date=params.next_visit_date,
            nurse_id=CURRENT_NURSE_ID,
            nurse_name=CURRENT_NURSE_NAME,
            signed_at=now,
            signed_by=CURRENT_NURSE_NAME,
            created_at=now,
            updated_at=now,
        )
        self.store.add_visit(visit)

        dashboard = self.context.dashboard
        if dashboard is not None and dashboard.is_enabled:
            dashboard.submit(visit)

        audit("create_visit_note", True, _elapsed_ms(start))

        return CreateVisitNoteResponse(
            success=True,
            visit_note_id=visit.id,
            message=f"Visit note {visit.id} created successfully for patient {params.patient_id}",
            visit_note=visit,
        )
