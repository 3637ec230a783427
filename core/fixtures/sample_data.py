"""
Test data and request payloads for the end-to-end flow.

Names and emails are randomised per run so repeated runs never collide
on the remote tenant.
"""
from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from carebook_sdk.utils.datetime import to_iso_z, utc_now
from core.scheduling.slots import SlotWindow

LAST_NAMES = (
    "Smith",
    "Johnson",
    "Williams",
    "Brown",
    "Jones",
    "Garcia",
    "Miller",
    "Davis",
    "Rodriguez",
    "Martinez",
)

WORKING_DAYS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY")


@dataclass(frozen=True)
class PersonData:
    first_name: str
    last_name: str
    email: str
    phone: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


def random_letters(length: int, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    return "".join(rng.choice(string.ascii_letters) for _ in range(length))


def generate_person(
    email_domain: str = "example.com",
    email_prefix: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> PersonData:
    """Random person with a timestamped, unique email."""
    rng = rng or random.Random()
    timestamp = int(time.time() * 1000)
    first_name = f"Test{random_letters(6, rng)}"
    local_part = f"{email_prefix}.{timestamp}" if email_prefix else f"{first_name}_{timestamp}"
    return PersonData(
        first_name=first_name,
        last_name=rng.choice(LAST_NAMES),
        email=f"{local_part}@{email_domain}",
        phone=f"+1{rng.randint(1_000_000_000, 9_999_999_999)}",
    )


def provider_payload(person: PersonData) -> dict[str, Any]:
    # empty DEA/licence lists: the API rejects null for both
    return {
        "firstName": person.first_name,
        "lastName": person.last_name,
        "email": person.email,
        "gender": "MALE",
        "role": "PROVIDER",
        "deaInformation": [],
        "licenceInformation": [],
    }


def patient_payload(
    person: PersonData, timezone_label: str, registered_at: Optional[datetime] = None
) -> dict[str, Any]:
    return {
        "firstName": person.first_name,
        "lastName": person.last_name,
        "email": person.email,
        "mobileNumber": person.phone,
        "birthDate": "1990-01-01T00:00:00.000Z",
        "gender": "MALE",
        "timezone": timezone_label,
        "registrationDate": to_iso_z(registered_at or utc_now()),
        "address": {
            "line1": "123 Test Street",
            "city": "Test City",
            "state": "CA",
            "country": "USA",
            "zipcode": "90210",
        },
        "emailConsent": True,
        "messageConsent": True,
        "callConsent": True,
    }


def availability_payload(
    provider_id: str,
    timezone_label: str,
    days: tuple[str, ...] = WORKING_DAYS,
    start_time: str = "09:00:00",
    end_time: str = "17:00:00",
) -> dict[str, Any]:
    """Weekly schedule descriptor: same virtual hours on every listed day."""
    return {
        "providerId": provider_id,
        "bookingWindow": "14",
        "timezone": timezone_label,
        "bufferTime": 0,
        "initialConsultTime": 30,
        "followupConsultTime": 20,
        "setToWeekdays": False,
        "settings": [
            {"type": "NEW", "slotTime": "30", "minNoticeUnit": "2_HOUR"},
            {"type": "FOLLOWUP", "slotTime": "20", "minNoticeUnit": "2_HOUR"},
        ],
        "blockDays": [],
        "daySlots": [
            {
                "day": day,
                "startTime": start_time,
                "endTime": end_time,
                "availabilityMode": "VIRTUAL",
            }
            for day in days
        ],
    }


def appointment_payload(
    provider_id: str,
    patient_id: str,
    window: SlotWindow,
    chief_complaint: str = "Automated test appointment",
) -> dict[str, Any]:
    return {
        "mode": "VIRTUAL",
        "patientId": patient_id,
        "providerId": provider_id,
        "startTime": window.start_iso,
        "endTime": window.end_iso,
        "type": "NEW",
        "paymentType": "CASH",
        "insurance_type": "SELF_PAY",
        "chiefComplaint": chief_complaint,
        "note": "Test appointment booking",
        "timezone": window.timezone_label,
        "duration": window.duration_minutes,
        "visit_type": "CONSULTATION",
        "isRecurring": False,
        "reminder_set": False,
    }
