"""Pydantic schemas for patients, visit notes and tool inputs/outputs.

Python attributes are snake_case. Every model also accepts and emits the
camelCase names used by the PointCare tool schema (``patientId``,
``visitDate``, ...), so ``model_json_schema()`` produces the schema the LLM
sees and ``model_validate`` accepts raw tool arguments.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Enumerations
# =============================================================================


class VisitType(str, Enum):
    """Home health visit types."""

    SKILLED_NURSING = "skilled_nursing"
    PHYSICAL_THERAPY = "physical_therapy"
    OCCUPATIONAL_THERAPY = "occupational_therapy"
    SPEECH_THERAPY = "speech_therapy"
    HOME_HEALTH_AIDE = "home_health_aide"
    SOCIAL_WORK = "social_work"
    INITIAL_ASSESSMENT = "initial_assessment"
    RECERTIFICATION = "recertification"
    DISCHARGE = "discharge"
    OTHER = "other"

    @property
    def label(self) -> str:
        return VISIT_TYPE_LABELS[self]


VISIT_TYPE_LABELS: dict[VisitType, str] = {
    VisitType.SKILLED_NURSING: "Skilled Nursing",
    VisitType.PHYSICAL_THERAPY: "Physical Therapy",
    VisitType.OCCUPATIONAL_THERAPY: "Occupational Therapy",
    VisitType.SPEECH_THERAPY: "Speech Therapy",
    VisitType.HOME_HEALTH_AIDE: "Home Health Aide",
    VisitType.SOCIAL_WORK: "Social Work",
    VisitType.INITIAL_ASSESSMENT: "Initial Assessment",
    VisitType.RECERTIFICATION: "Recertification",
    VisitType.DISCHARGE: "Discharge",
    VisitType.OTHER: "Other",
}


class VisitStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    MISSED = "missed"
    CANCELLED = "cancelled"
    PENDING_REVIEW = "pending_review"


PatientStatus = Literal["active", "inactive", "discharged", "pending"]
SearchType = Literal["name", "id", "phone", "all"]


# =============================================================================
# Patient Schemas
# =============================================================================


class PatientId(CamelModel):
    """Patient identifiers."""

    id: str = Field(..., description="Internal EMR ID (e.g., PT-12345)")
    mrn: str | None = Field(None, description="Medical Record Number")
    external_id: str | None = Field(None, description="External system ID")


class PatientDemographics(CamelModel):
    first_name: str
    last_name: str
    middle_name: str | None = None
    date_of_birth: str = Field(..., description="ISO 8601 date (YYYY-MM-DD)")
    gender: Literal["male", "female", "other", "unknown"] | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Address(CamelModel):
    street1: str
    street2: str | None = None
    city: str
    state: str
    zip_code: str
    country: str | None = None


class PatientContact(CamelModel):
    phone: str | None = None
    phone_type: Literal["home", "mobile", "work"] | None = None
    alternate_phone: str | None = None
    email: str | None = None
    address: Address | None = None


class PatientInsurance(CamelModel):
    """Insurance summary only."""

    primary_payer: str | None = None
    member_id: str | None = None
    group_number: str | None = None


class PatientCareTeam(CamelModel):
    primary_nurse: str | None = None
    primary_physician: str | None = None
    case_manager: str | None = None
    agency: str | None = None


class Patient(CamelModel):
    """Full patient record."""

    id: PatientId
    demographics: PatientDemographics
    contact: PatientContact = Field(default_factory=PatientContact)
    insurance: PatientInsurance | None = None
    care_team: PatientCareTeam | None = None
    status: PatientStatus
    admission_date: str | None = None
    discharge_date: str | None = None
    diagnosis: list[str] = Field(default_factory=list, description="Primary diagnoses")
    created_at: str
    updated_at: str


class PatientSearchResult(CamelModel):
    """Reduced patient data for listings."""

    id: str
    first_name: str
    last_name: str
    date_of_birth: str
    phone: str | None = None
    status: PatientStatus
    primary_diagnosis: str | None = None

    @classmethod
    def from_patient(cls, patient: Patient) -> PatientSearchResult:
        return cls(
            id=patient.id.id,
            first_name=patient.demographics.first_name,
            last_name=patient.demographics.last_name,
            date_of_birth=patient.demographics.date_of_birth,
            phone=patient.contact.phone,
            status=patient.status,
            primary_diagnosis=patient.diagnosis[0] if patient.diagnosis else None,
        )


class PatientSearchParams(CamelModel):
    """Input schema for searching patients."""

    query: str = Field(
        ...,
        description="Search term: patient name, ID (e.g., PT-10001), or phone number",
    )
    search_type: SearchType = Field(
        default="all",
        description='Type of search to perform. Defaults to "all" which searches across all fields.',
    )
    status: PatientStatus | None = Field(
        None,
        description="Filter by patient status. If not specified, returns all statuses.",
    )
    limit: int = Field(
        default=10,
        description="Maximum number of results to return (default: 10, max: 50)",
    )
    offset: int = Field(default=0, description="Number of matches to skip (default: 0)")


class PatientSearchResponse(CamelModel):
    results: list[PatientSearchResult] = Field(default_factory=list)
    total: int = Field(..., description="Total matches before pagination")
    limit: int
    offset: int
    has_more: bool


# =============================================================================
# Visit Schemas
# =============================================================================


class VitalSigns(CamelModel):
    """Vital signs recorded during a visit."""

    blood_pressure_systolic: int | float | None = Field(None, description="Systolic BP (mmHg)")
    blood_pressure_diastolic: int | float | None = Field(None, description="Diastolic BP (mmHg)")
    heart_rate: int | float | None = Field(None, description="Heart rate (bpm)")
    respiratory_rate: int | float | None = Field(None, description="Respiratory rate (breaths/min)")
    temperature: int | float | None = Field(None, description="Temperature")
    temperature_unit: Literal["F", "C"] | None = Field(None, description="Temperature unit")
    oxygen_saturation: int | float | None = Field(None, description="O2 saturation (%)")
    weight: int | float | None = Field(None, description="Weight")
    weight_unit: Literal["lbs", "kg"] | None = Field(None, description="Weight unit")
    pain_level: int | None = Field(None, description="Pain level (0-10)", ge=0, le=10)


class CreateVisitNoteParams(CamelModel):
    """Input schema for creating a visit note."""

    patient_id: str = Field(..., description="Patient ID from search_patient (e.g., PT-10001)")
    visit_type: VisitType = Field(..., description="Type of visit")
    visit_date: str = Field(..., description="Date of visit (YYYY-MM-DD format)")
    time_in: str = Field(..., description="Time nurse arrived (HH:MM format, 24-hour)")
    time_out: str = Field(..., description="Time nurse departed (HH:MM format, 24-hour)")
    vital_signs: VitalSigns | None = Field(None, description="Vital signs recorded during visit")
    subjective: str | None = Field(
        None, description="Patient's reported symptoms, concerns, and statements"
    )
    objective: str | None = Field(
        None, description="Nurse's observations and physical assessment findings"
    )
    assessment: str | None = Field(
        None, description="Clinical assessment and interpretation of findings"
    )
    plan: str | None = Field(None, description="Care plan and next steps")
    interventions: list[str] | None = Field(
        None, description="List of interventions performed during visit"
    )
    patient_response: str | None = Field(
        None, description="How patient responded to care/interventions"
    )
    education: list[str] | None = Field(None, description="Patient education topics covered")
    next_visit_date: str | None = Field(None, description="Scheduled next visit date (YYYY-MM-DD)")
    notes: str | None = Field(None, description="Additional notes or comments")


class VisitNote(CamelModel):
    """Visit note record as stored in the EMR."""

    id: str
    patient_id: str
    visit_type: VisitType
    status: VisitStatus
    visit_date: str
    time_in: str
    time_out: str
    duration: int = Field(..., description="Minutes")
    vital_signs: VitalSigns | None = None
    subjective: str | None = None
    objective: str | None = None
    assessment: str | None = None
    plan: str | None = None
    interventions: list[str] | None = None
    patient_response: str | None = None
    education: list[str] | None = None
    notes: str | None = None
    next_visit_date: str | None = None
    nurse_id: str
    nurse_name: str
    signed_at: str | None = None
    signed_by: str | None = None
    created_at: str
    updated_at: str


class VisitNoteSummary(CamelModel):
    """Visit note summary for history listings."""

    id: str
    visit_date: str
    visit_type: VisitType
    status: VisitStatus
    duration: int
    nurse_name: str
    primary_diagnosis: str | None = None
    has_vitals: bool

    @classmethod
    def from_visit(cls, visit: VisitNote) -> VisitNoteSummary:
        return cls(
            id=visit.id,
            visit_date=visit.visit_date,
            visit_type=visit.visit_type,
            status=visit.status,
            duration=visit.duration,
            nurse_name=visit.nurse_name,
            has_vitals=visit.vital_signs is not None,
        )


class PatientHistoryParams(CamelModel):
    """Input schema for retrieving a patient's visit history."""

    patient_id: str = Field(..., description="Patient ID from search_patient (e.g., PT-10001)")
    limit: int = Field(
        default=10,
        description="Maximum number of visits to return (default: 10, max: 50)",
    )
    offset: int = Field(default=0, description="Number of visits to skip (default: 0)")
    start_date: str | None = Field(
        None, description="Filter visits on or after this date (YYYY-MM-DD)"
    )
    end_date: str | None = Field(
        None, description="Filter visits on or before this date (YYYY-MM-DD)"
    )
    visit_type: VisitType | None = Field(None, description="Filter by visit type")


class PatientHistoryResponse(CamelModel):
    patient_id: str
    patient_name: str
    visits: list[VisitNoteSummary] = Field(default_factory=list)
    total: int
    limit: int
    offset: int
    has_more: bool


class CreateVisitNoteResponse(CamelModel):
    success: bool
    visit_note_id: str
    message: str
    visit_note: VisitNote | None = None
