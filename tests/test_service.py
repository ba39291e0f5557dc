"""Tests for the patient service against the mock store.

Each test gets its own context (see conftest.py), so visits created in one
test never show up in another.
"""

from __future__ import annotations

import pytest

from ratchet.config import RatchetConfig
from ratchet.context import RatchetContext
from ratchet.errors import NotFoundError, ValidationError
from ratchet.tools.schemas import (
    CreateVisitNoteParams,
    PatientHistoryParams,
    PatientSearchParams,
    VisitStatus,
    VisitType,
    VitalSigns,
)
from ratchet.tools.service import PatientService, calculate_duration

from .conftest import visit_args


def _create(**overrides: object) -> CreateVisitNoteParams:
    return CreateVisitNoteParams.model_validate(visit_args(**overrides))


# --- search_patients ---


class TestSearchPatients:
    @pytest.mark.asyncio
    async def test_find_by_name(self, service: PatientService) -> None:
        result = await service.search_patients(PatientSearchParams(query="Eleanor"))

        assert len(result.results) > 0
        assert result.results[0].first_name == "Eleanor"

    @pytest.mark.asyncio
    async def test_name_match_is_case_insensitive(self, service: PatientService) -> None:
        result = await service.search_patients(
            PatientSearchParams(query="eLeAnOr tHoMpSoN", search_type="name")
        )

        assert [p.id for p in result.results] == ["PT-10001"]

    @pytest.mark.asyncio
    async def test_find_by_id(self, service: PatientService) -> None:
        result = await service.search_patients(
            PatientSearchParams(query="PT-10001", search_type="id")
        )

        assert len(result.results) == 1
        assert result.results[0].id == "PT-10001"

    @pytest.mark.asyncio
    async def test_find_by_phone_digits_only(self, service: PatientService) -> None:
        result = await service.search_patients(
            PatientSearchParams(query="5550101", search_type="phone")
        )

        assert len(result.results) == 1
        assert result.results[0].phone == "555-0101"

    @pytest.mark.asyncio
    async def test_phone_search_ignores_query_formatting(self, service: PatientService) -> None:
        result = await service.search_patients(
            PatientSearchParams(query="(555) 0102", search_type="phone")
        )

        assert [p.id for p in result.results] == ["PT-10002"]

    @pytest.mark.asyncio
    async def test_all_matches_any_field(self, service: PatientService) -> None:
        result = await service.search_patients(PatientSearchParams(query="Thompson"))

        assert {p.id for p in result.results} == {"PT-10001", "PT-10004"}

    @pytest.mark.asyncio
    async def test_name_query_does_not_match_every_phone(self, service: PatientService) -> None:
        """A query with no digits must not match on phone."""
        result = await service.search_patients(PatientSearchParams(query="Wilson"))

        assert [p.id for p in result.results] == ["PT-10003"]

    @pytest.mark.asyncio
    async def test_results_only_contain_matching_records(self, service: PatientService) -> None:
        for search_type, query in [("name", "son"), ("id", "pt-1000"), ("phone", "010")]:
            result = await service.search_patients(
                PatientSearchParams(query=query, search_type=search_type)
            )
            for patient in result.results:
                if search_type == "name":
                    assert query in f"{patient.first_name} {patient.last_name}".lower()
                elif search_type == "id":
                    assert query in patient.id.lower()
                else:
                    assert query in (patient.phone or "").replace("-", "")

    @pytest.mark.asyncio
    async def test_filter_by_status(self, service: PatientService) -> None:
        result = await service.search_patients(
            PatientSearchParams(query="PT-", status="discharged")
        )

        assert [p.id for p in result.results] == ["PT-10005"]
        assert all(p.status == "discharged" for p in result.results)

    @pytest.mark.asyncio
    async def test_respects_limit(self, service: PatientService) -> None:
        result = await service.search_patients(PatientSearchParams(query="PT-", limit=2))

        assert result.limit == 2
        assert len(result.results) == 2
        assert result.total == 5
        assert result.has_more is True

    @pytest.mark.asyncio
    async def test_offset_preserves_store_order(self, service: PatientService) -> None:
        result = await service.search_patients(
            PatientSearchParams(query="PT-", limit=2, offset=2)
        )

        assert [p.id for p in result.results] == ["PT-10003", "PT-10004"]
        assert result.offset == 2

    @pytest.mark.asyncio
    async def test_pagination_total_is_independent_of_window(
        self, service: PatientService
    ) -> None:
        for limit in (1, 2, 3, 10):
            for offset in (0, 1, 4, 5, 7):
                result = await service.search_patients(
                    PatientSearchParams(query="PT-", limit=limit, offset=offset)
                )
                assert result.total == 5
                assert result.has_more == (offset + len(result.results) < result.total)

    @pytest.mark.asyncio
    async def test_default_limit(self, service: PatientService) -> None:
        result = await service.search_patients(PatientSearchParams(query="PT-"))

        assert result.limit == 10
        assert result.offset == 0
        assert result.has_more is False

    @pytest.mark.asyncio
    async def test_primary_diagnosis_is_first_diagnosis(self, service: PatientService) -> None:
        result = await service.search_patients(PatientSearchParams(query="PT-10002"))

        assert result.results[0].primary_diagnosis == "COPD"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   "])
    async def test_empty_query_raises(self, service: PatientService, query: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.search_patients(PatientSearchParams(query=query))

        assert exc_info.value.field == "query"

    @pytest.mark.asyncio
    async def test_no_match_returns_empty(self, service: PatientService) -> None:
        result = await service.search_patients(
            PatientSearchParams(query="NonexistentPatient12345", search_type="name")
        )

        assert result.results == []
        assert result.total == 0
        assert result.has_more is False


# --- get_patient ---


class TestGetPatient:
    @pytest.mark.asyncio
    async def test_returns_patient(self, service: PatientService) -> None:
        patient = await service.get_patient("PT-10001")

        assert patient.id.id == "PT-10001"
        assert patient.demographics.first_name == "Eleanor"
        assert patient.demographics.last_name == "Thompson"

    @pytest.mark.asyncio
    async def test_unknown_id_raises_not_found(self, service: PatientService) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_patient("PT-99999")

        assert "PT-99999" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_empty_id_raises_validation(self, service: PatientService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.get_patient("")

        assert exc_info.value.field == "patientId"


# --- get_patient_history ---


class TestGetPatientHistory:
    @pytest.mark.asyncio
    async def test_returns_history(self, service: PatientService) -> None:
        result = await service.get_patient_history(PatientHistoryParams(patient_id="PT-10001"))

        assert result.patient_id == "PT-10001"
        assert result.patient_name == "Eleanor Thompson"
        assert [v.id for v in result.visits] == ["VN-20001", "VN-20002"]
        assert all(v.has_vitals for v in result.visits)

    @pytest.mark.asyncio
    async def test_respects_limit(self, service: PatientService) -> None:
        result = await service.get_patient_history(
            PatientHistoryParams(patient_id="PT-10001", limit=1)
        )

        assert len(result.visits) == 1
        assert result.total == 2
        assert result.has_more is True

    @pytest.mark.asyncio
    async def test_sorted_most_recent_first(self, service: PatientService) -> None:
        await service.create_visit_note(_create(visitDate="2024-12-18"))
        await service.create_visit_note(_create(visitDate="2025-01-02"))

        result = await service.get_patient_history(PatientHistoryParams(patient_id="PT-10001"))

        dates = [v.visit_date for v in result.visits]
        for earlier, later in zip(dates, dates[1:]):
            assert earlier >= later
        assert dates[0] == "2025-01-02"

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(self, service: PatientService) -> None:
        result = await service.get_patient_history(
            PatientHistoryParams(
                patient_id="PT-10001", start_date="2024-12-17", end_date="2024-12-17"
            )
        )

        assert [v.id for v in result.visits] == ["VN-20002"]

    @pytest.mark.asyncio
    async def test_filter_by_visit_type(self, service: PatientService) -> None:
        await service.create_visit_note(_create(visitType="physical_therapy"))

        result = await service.get_patient_history(
            PatientHistoryParams(patient_id="PT-10001", visit_type=VisitType.PHYSICAL_THERAPY)
        )

        assert result.total == 1
        assert result.visits[0].visit_type is VisitType.PHYSICAL_THERAPY

    @pytest.mark.asyncio
    async def test_patient_without_visits(self, service: PatientService) -> None:
        result = await service.get_patient_history(PatientHistoryParams(patient_id="PT-10005"))

        assert result.visits == []
        assert result.total == 0
        assert result.has_more is False

    @pytest.mark.asyncio
    async def test_unknown_patient_raises_not_found(self, service: PatientService) -> None:
        with pytest.raises(NotFoundError):
            await service.get_patient_history(PatientHistoryParams(patient_id="PT-99999"))

    @pytest.mark.asyncio
    async def test_empty_patient_id_raises_validation(self, service: PatientService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.get_patient_history(PatientHistoryParams(patient_id=""))

        assert exc_info.value.field == "patientId"


# --- create_visit_note ---


class TestCreateVisitNote:
    @pytest.mark.asyncio
    async def test_creates_with_required_fields(self, service: PatientService) -> None:
        result = await service.create_visit_note(_create())

        assert result.success is True
        assert result.visit_note_id.startswith("VN-")
        assert result.visit_note is not None
        assert result.visit_note.patient_id == "PT-10001"
        assert result.visit_note.duration == 45
        assert result.visit_note.status is VisitStatus.COMPLETED
        assert result.visit_note.signed_by == "Current User, RN"
        assert result.message == (
            f"Visit note {result.visit_note_id} created successfully for patient PT-10001"
        )

    @pytest.mark.asyncio
    async def test_keeps_vital_signs(self, service: PatientService) -> None:
        result = await service.create_visit_note(
            _create(
                timeIn="14:00",
                timeOut="14:30",
                vitalSigns={
                    "bloodPressureSystolic": 120,
                    "bloodPressureDiastolic": 80,
                    "heartRate": 72,
                },
            )
        )

        assert result.visit_note is not None
        assert result.visit_note.vital_signs == VitalSigns(
            blood_pressure_systolic=120, blood_pressure_diastolic=80, heart_rate=72
        )

    @pytest.mark.asyncio
    async def test_duration_calculation(self, service: PatientService) -> None:
        result = await service.create_visit_note(_create(timeIn="09:15", timeOut="10:00"))

        assert result.visit_note is not None
        assert result.visit_note.duration == 45

    @pytest.mark.asyncio
    async def test_negative_duration_clamps_to_zero(self, service: PatientService) -> None:
        result = await service.create_visit_note(_create(timeIn="10:00", timeOut="09:15"))

        assert result.visit_note is not None
        assert result.visit_note.duration == 0

    @pytest.mark.asyncio
    async def test_ids_are_sequential_and_unique(self, service: PatientService) -> None:
        first = await service.create_visit_note(_create())
        second = await service.create_visit_note(_create())

        assert first.visit_note_id == "VN-30000"
        assert second.visit_note_id == "VN-30001"

    @pytest.mark.asyncio
    async def test_unknown_patient_does_not_append(self, service: PatientService) -> None:
        before = await service.get_patient_history(PatientHistoryParams(patient_id="PT-10001"))

        with pytest.raises(NotFoundError):
            await service.create_visit_note(_create(patientId="PT-99999"))

        after = await service.get_patient_history(PatientHistoryParams(patient_id="PT-10001"))
        assert after.total == before.total
        assert len(service.store.visits) == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,alias",
        [
            ("patientId", "patientId"),
            ("visitDate", "visitDate"),
            ("timeIn", "timeIn"),
            ("timeOut", "timeOut"),
        ],
    )
    async def test_missing_required_field_raises(
        self, service: PatientService, field: str, alias: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create_visit_note(_create(**{field: ""}))

        assert exc_info.value.field == alias

    @pytest.mark.asyncio
    async def test_malformed_time_raises(self, service: PatientService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create_visit_note(_create(timeIn="9am"))

        assert exc_info.value.field == "timeIn"

    @pytest.mark.asyncio
    async def test_round_trip_through_history(self, service: PatientService) -> None:
        created = await service.create_visit_note(
            _create(patientId="PT-10003", timeIn="13:05", timeOut="13:50")
        )

        history = await service.get_patient_history(PatientHistoryParams(patient_id="PT-10003"))

        match = [v for v in history.visits if v.id == created.visit_note_id]
        assert len(match) == 1
        assert match[0].duration == 45

    @pytest.mark.asyncio
    async def test_separate_contexts_are_isolated(self) -> None:
        one = PatientService(RatchetContext(config=RatchetConfig()))
        two = PatientService(RatchetContext(config=RatchetConfig()))

        await one.create_visit_note(_create())

        assert len(one.store.visits) == 5
        assert len(two.store.visits) == 4


# --- live mode ---


class TestLiveMode:
    @pytest.mark.asyncio
    async def test_live_mode_is_not_implemented(self) -> None:
        service = PatientService(
            RatchetContext(config=RatchetConfig(mock_mode=False, api_key="key"))
        )

        with pytest.raises(NotImplementedError):
            await service.search_patients(PatientSearchParams(query="Eleanor"))

    @pytest.mark.asyncio
    async def test_validation_runs_before_live_check(self) -> None:
        service = PatientService(RatchetContext(config=RatchetConfig(mock_mode=False)))

        with pytest.raises(ValidationError):
            await service.get_patient("")


def test_calculate_duration() -> None:
    assert calculate_duration("09:15", "10:00") == 45
    assert calculate_duration("23:00", "00:30") == 0
    assert calculate_duration("8:05", "8:05") == 0
