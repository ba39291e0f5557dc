"""Supabase sync for the PointCare EMR dashboard.

Pushes visit notes to the dashboard's ``visits`` table through Supabase's
REST (PostgREST) endpoint so the dashboard shows new documentation as soon
as a nurse creates it through Ratchet.

Sync is best-effort: every failure is logged and reported as ``False``, and
nothing here ever raises into the visit-note creation path.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from ..config import RatchetConfig
from .schemas import VisitNote, VitalSigns

logger = logging.getLogger(__name__)

VISITS_TABLE = "visits"

# VisitNote attribute -> dashboard column, for partial updates
_UPDATE_COLUMNS = {
    "subjective": "subjective",
    "objective": "objective",
    "assessment": "assessment",
    "plan": "plan",
    "time_in": "time_in",
    "time_out": "time_out",
    "next_visit_date": "next_visit_date",
    "status": "status",
}


# =============================================================================
# Transforms
# =============================================================================


def transform_vitals(vitals: VitalSigns | None) -> dict[str, Any]:
    """Convert vital signs to the dashboard's JSON column layout."""
    if vitals is None:
        return {}

    return {
        "bloodPressureSystolic": vitals.blood_pressure_systolic,
        "bloodPressureDiastolic": vitals.blood_pressure_diastolic,
        "heartRate": vitals.heart_rate,
        "oxygenSaturation": vitals.oxygen_saturation,
        "temperature": vitals.temperature,
        "temperatureUnit": vitals.temperature_unit or "F",
        "respiratoryRate": vitals.respiratory_rate,
        "painLevel": vitals.pain_level,
        "weight": vitals.weight,
        "weightUnit": vitals.weight_unit or "lbs",
        # Not captured by Ratchet yet
        "bloodGlucose": None,
        "glucoseUnit": "mg/dL",
        "glucoseTiming": None,
    }


def _coded_items(items: list[str] | None, prefix: str) -> list[dict[str, Any]]:
    if not items:
        return []
    return [
        {"code": f"{prefix}-{index:03d}", "description": description, "completed": True}
        for index, description in enumerate(items, 1)
    ]


def transform_interventions(interventions: list[str] | None) -> list[dict[str, Any]]:
    """``["Wound care"]`` -> ``[{"code": "INT-001", "description": ..., "completed": True}]``."""
    return _coded_items(interventions, "INT")


def transform_education(education: list[str] | None) -> list[dict[str, Any]]:
    return _coded_items(education, "EDU")


def transform_visit(visit: VisitNote) -> dict[str, Any]:
    """Map a visit note onto a ``visits`` table row."""
    return {
        "id": visit.id,
        "patient_id": visit.patient_id,
        "visit_type": visit.visit_type.value,
        "visit_date": visit.visit_date,
        "time_in": visit.time_in,
        "time_out": visit.time_out,
        "nurse_name": visit.nurse_name,
        "vital_signs": transform_vitals(visit.vital_signs),
        "subjective": visit.subjective,
        "objective": visit.objective,
        "assessment": visit.assessment,
        "plan": visit.plan,
        "interventions": transform_interventions(visit.interventions),
        "education": transform_education(visit.education),
        "next_visit_date": visit.next_visit_date,
        "status": visit.status.value,
    }


def transform_updates(updates: dict[str, Any]) -> dict[str, Any]:
    """Map only the fields present in a partial update.

    Accepts snake_case or camelCase keys.
    """
    known = {name: name for name in VisitNote.model_fields}
    for name, field in VisitNote.model_fields.items():
        if field.alias:
            known[field.alias] = name

    normalized = {known[key]: value for key, value in updates.items() if key in known}
    row: dict[str, Any] = {}

    if "vital_signs" in normalized:
        vitals = normalized["vital_signs"]
        if isinstance(vitals, dict):
            vitals = VitalSigns.model_validate(vitals)
        row["vital_signs"] = transform_vitals(vitals)
    if "interventions" in normalized:
        row["interventions"] = transform_interventions(normalized["interventions"])
    if "education" in normalized:
        row["education"] = transform_education(normalized["education"])

    for attr, column in _UPDATE_COLUMNS.items():
        if attr in normalized:
            value = normalized[attr]
            row[column] = getattr(value, "value", value)

    return row


# =============================================================================
# Client
# =============================================================================


class DashboardSync:
    """Async Supabase REST client for the ``visits`` table."""

    def __init__(
        self,
        url: str | None,
        key: str | None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url.rstrip("/") if url else None
        self._key = key
        self._timeout = timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None
        self._pending: set[asyncio.Task[bool]] = set()

    @classmethod
    def from_config(cls, config: RatchetConfig) -> DashboardSync:
        return cls(
            config.supabase_url,
            config.supabase_key,
            timeout=config.request_timeout_seconds,
        )

    @property
    def is_enabled(self) -> bool:
        return bool(self._url and self._key)

    @property
    def pending(self) -> int:
        """Number of background syncs still in flight."""
        return len(self._pending)

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=f"{self._url}/rest/v1",
                timeout=self._timeout,
                transport=self._transport,
                headers={
                    "apikey": self._key or "",
                    "Authorization": f"Bearer {self._key}",
                    "Content-Type": "application/json",
                },
            )
            logger.info("Supabase client initialized")
        return self._http

    async def sync_visit(self, visit: VisitNote) -> bool:
        """Upsert *visit* into the dashboard, keyed by visit id.

        Returns False on any failure instead of raising.
        """
        if not self.is_enabled:
            logger.debug("Supabase not configured, skipping sync")
            return False

        start = time.perf_counter()
        logger.info(
            "Syncing visit to Supabase",
            extra={"data": {"visitId": visit.id, "patientId": visit.patient_id}},
        )

        try:
            response = await self._client().post(
                f"/{VISITS_TABLE}",
                params={"on_conflict": "id"},
                json=transform_visit(visit),
                headers={"Prefer": "resolution=merge-duplicates,return=representation"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Supabase sync failed",
                extra={
                    "data": {
                        "status": e.response.status_code,
                        "error": _error_message(e.response),
                        "visitId": visit.id,
                    }
                },
            )
            return False
        except Exception as e:
            # Transport errors and bad payloads alike
            logger.error(
                "Supabase sync error",
                extra={"data": {"error": type(e).__name__, "visitId": visit.id}},
            )
            return False

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Supabase sync successful",
            extra={"data": {"visitId": visit.id, "duration": round(elapsed_ms)}},
        )
        return True

    async def update_visit(self, visit_id: str, updates: dict[str, Any]) -> bool:
        """Apply a partial update to an existing dashboard row.

        Args:
            visit_id: Dashboard row id (the visit note id)
            updates: VisitNote fields to change, snake_case or camelCase

        Returns:
            True if the row was patched or there was nothing to send,
            False on any failure. Never raises.
        """
        if not self.is_enabled:
            logger.debug("Supabase not configured, skipping update")
            return False

        try:
            row = transform_updates(updates)
            if not row:
                logger.debug("No dashboard fields in update, skipping")
                return True

            response = await self._client().patch(
                f"/{VISITS_TABLE}",
                params={"id": f"eq.{visit_id}"},
                json=row,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Supabase update failed",
                extra={
                    "data": {
                        "status": e.response.status_code,
                        "error": _error_message(e.response),
                        "visitId": visit_id,
                    }
                },
            )
            return False
        except Exception as e:
            logger.error(
                "Supabase update error",
                extra={"data": {"error": type(e).__name__, "visitId": visit_id}},
            )
            return False

        logger.info("Supabase update successful", extra={"data": {"visitId": visit_id}})
        return True

    def submit(self, visit: VisitNote) -> None:
        """Schedule a background sync of *visit* and return immediately."""
        if not self.is_enabled:
            return
        task = asyncio.create_task(self.sync_visit(visit))
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[bool]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background dashboard sync crashed",
                extra={"data": {"error": type(exc).__name__}},
            )

    async def drain(self) -> None:
        """Wait for all in-flight background syncs."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        if self._http is not None:
            await self._http.aclose()
            self._http = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
