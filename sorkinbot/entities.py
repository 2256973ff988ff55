"""Domain entities: appointments, doctors, schedules, translations, messages and users."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AppointmentType(str, Enum):
    """Where an appointment takes place."""

    ONLINE = "online_appointment"
    CLINIC = "clinic_appointment"
    HOME = "home_appointment"


@dataclass
class Appointment:
    """A booked appointment as known to the clinic system."""

    id: int = 0
    time_start: str = ""
    time_end: str = ""
    clinic_id: int = 0
    clinic: str = ""
    doctor_id: int = 0
    doctor: str = ""
    patient_id: int = 0
    patient_name: str = ""
    patient_birth_date: str = ""
    patient_gender: str = ""
    patient_phone: str = ""
    patient_email: str = ""
    date_created: str = ""
    date_updated: str = ""
    status: str = ""
    status_id: int = 0
    confirm_status: str = ""
    source: str = ""
    moved_to: int = 0
    moved_from: int = 0

    def date(self) -> str:
        """The date part of the end time ("dd.mm.yyyy hh:mm" -> "dd.mm.yyyy")."""
        return self.time_end.split(" ")[0]

    def time_start_short(self) -> str:
        """The clock part of the start time."""
        return _clock_part(self.time_start)

    def time_end_short(self) -> str:
        """The clock part of the end time."""
        return _clock_part(self.time_end)


def _clock_part(timestamp: str) -> str:
    parts = timestamp.split(" ")
    if len(parts) < 2:
        raise ValueError(f"timestamp has no time part: {timestamp!r}")
    return parts[1]


@dataclass
class DraftAppointment:
    """An appointment the user is still putting together; every field may be unset."""

    time_start: Optional[str] = None
    time_end: Optional[str] = None
    doctor_id: Optional[int] = None
    doctor_name: Optional[str] = None
    tg_id: Optional[int] = None
    speciality_id: Optional[int] = None
    date: Optional[str] = None
    appointment_type: Optional[AppointmentType] = None


@dataclass
class Doctor:
    """A doctor with their professions and an optional description."""

    id: int = 0
    name: str = ""
    phone: str = ""
    email: str = ""
    profession_titles: str = ""
    second_profession_titles: str = ""
    is_deleted: bool = False
    second_professions: list[int] = field(default_factory=list)
    info: str = ""


@dataclass
class Schedule:
    """One slot of a doctor's schedule."""

    clinic_id: int = 0
    doctor_id: int = 0
    category_id: int = 0
    date: str = ""
    time_start: str = ""
    time_start_short: str = ""
    time_end: str = ""
    time_end_short: str = ""
    category: str = ""
    profession: str = ""
    room: str = ""
    doctor_name: str = ""
    is_busy: bool = False
    is_past: bool = False


@dataclass
class SchedulePeriod:
    """A working period of a doctor on a given day ("dd.mm.yyyy")."""

    date: str = ""
    doctor_id: int = 0
    time_start: str = ""
    time_end: str = ""

    def day(self) -> Optional[_dt.date]:
        """The period's date, or None when the parts do not form a valid date."""
        items = self.date.split(".")
        if len(items) < 3:
            raise ValueError(f"date is not in dd.mm.yyyy form: {self.date!r}")
        day, month, year = items[0], items[1], items[2]
        try:
            return _dt.date.fromisoformat(f"{year}-{month}-{day}")
        except ValueError:
            return None


@dataclass
class Speciality:
    """A medical speciality offered by the clinic."""

    id: int = 0
    name: str = ""
    doctor_name: str = ""
    is_deleted: bool = False


@dataclass
class Translation:
    """Texts of one translatable item in Russian, English and Brazilian Portuguese."""

    slug: str = ""
    profession: str = ""
    ru_text: str = ""
    eng_text: str = ""
    pt_br_text: str = ""
    uses: bool = False
    source_id: Optional[int] = None


@dataclass
class Message:
    """A bot message stored in three languages."""

    id: int = 0
    ru_text: str = ""
    eng_text: str = ""
    pt_br_text: str = ""


@dataclass
class MessageLog:
    """A logged Telegram message."""

    tg_message_id: int = 0
    user_tg_id: int = 0
    text: str = ""


@dataclass
class User:
    """A Telegram user of the bot."""

    tg_id: int = 0
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    state: Optional[str] = None
    phone: Optional[str] = None
    home_address: str = ""
    patient_id: Optional[int] = None
    registration_time: str = ""
    birth_date: Optional[str] = None
    third_name: str = ""
    is_bot: bool = False

    def __post_init__(self) -> None:
        if self.home_address is None:
            self.home_address = ""