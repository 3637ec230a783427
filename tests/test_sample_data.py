"""Tests for generated people and request payloads."""

import logging
import random
from datetime import date, datetime, timezone

from carebook_sdk.logging import configure_logging, get_logger
from core.fixtures.sample_data import (
    appointment_payload,
    availability_payload,
    generate_person,
    patient_payload,
    provider_payload,
)
from core.scheduling.timewindow import appointment_window


def test_generated_people_are_unique():
    rng = random.Random(7)
    first, second = generate_person(rng=rng), generate_person(rng=rng)

    assert first.email != second.email
    assert first.first_name.startswith("Test")
    assert first.phone.startswith("+1") and len(first.phone) == 12
    assert first.full_name == f"{first.first_name} {first.last_name}"


def test_email_prefix():
    person = generate_person(email_domain="clinic.test", email_prefix="test.provider")

    assert person.email.startswith("test.provider.")
    assert person.email.endswith("@clinic.test")


def test_provider_payload_sends_empty_lists():
    payload = provider_payload(generate_person())

    assert payload["role"] == "PROVIDER"
    assert payload["deaInformation"] == []
    assert payload["licenceInformation"] == []


def test_patient_payload_registration_date():
    person = generate_person()
    payload = patient_payload(person, "EST", datetime(2026, 10, 19, 8, 5, 3, tzinfo=timezone.utc))

    assert payload["registrationDate"] == "2026-10-19T08:05:03.000Z"
    assert payload["timezone"] == "EST"
    assert payload["mobileNumber"] == person.phone


def test_availability_payload_days():
    payload = availability_payload("prov-1", "EST", days=("MONDAY",))

    assert payload["providerId"] == "prov-1"
    assert payload["daySlots"] == [
        {"day": "MONDAY", "startTime": "09:00:00", "endTime": "17:00:00", "availabilityMode": "VIRTUAL"}
    ]


def test_appointment_payload_uses_window():
    window = appointment_window(date(2026, 10, 19), "MONDAY", 14, "EST")

    payload = appointment_payload("prov-1", "pat-1", window)

    assert payload["startTime"] == "2026-10-26T19:00:00.000Z"
    assert payload["endTime"] == "2026-10-26T19:30:00.000Z"
    assert payload["duration"] == 30
    assert payload["timezone"] == "EST"


def test_logger_namespace_and_single_handler():
    logger = get_logger("tests.sample")
    again = get_logger("tests.sample")

    assert logger is again
    assert logger.name == "carebook.tests.sample"
    assert len(logger.handlers) == 1

    configure_logging("debug")
    assert logger.level == logging.DEBUG
    configure_logging("INFO")
