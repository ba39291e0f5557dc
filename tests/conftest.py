"""Shared fixtures: a fresh mock-mode context per test."""

from __future__ import annotations

import pytest

from ratchet.config import RatchetConfig
from ratchet.context import RatchetContext
from ratchet.tools.service import PatientService


@pytest.fixture
def config() -> RatchetConfig:
    return RatchetConfig(mock_mode=True)


@pytest.fixture
def context(config: RatchetConfig) -> RatchetContext:
    return RatchetContext(config=config)


@pytest.fixture
def service(context: RatchetContext) -> PatientService:
    return PatientService(context)


def visit_args(**overrides: object) -> dict[str, object]:
    """Minimal valid create_visit_note arguments."""
    args: dict[str, object] = {
        "patientId": "PT-10001",
        "visitType": "skilled_nursing",
        "visitDate": "2024-12-22",
        "timeIn": "10:00",
        "timeOut": "10:45",
    }
    args.update(overrides)
    return args
