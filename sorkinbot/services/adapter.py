"""Cached access to the clinic information system through a gateway."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from sorkinbot.cache import TTLCache
from sorkinbot.entities import (
    Appointment,
    AppointmentType,
    Doctor,
    DraftAppointment,
    Schedule,
    SchedulePeriod,
    Speciality,
    User,
)

logger = logging.getLogger(__name__)

CACHE_CLEAN_PERIOD = 10.0
APPOINTMENT_LIST_TTL = 10 * 60.0
APPOINTMENT_ITEM_TTL = 5 * 60.0
APPOINTMENT_DETAIL_TTL = 10 * 60.0
SCHEDULES_TTL = 10 * 60.0
DOCTORS_TTL = 12 * 60 * 60.0
SPECIALITIES_TTL = 12 * 60 * 60.0


@dataclass
class CreateAppointmentRequest:
    """What the clinic system needs to book an appointment."""

    patient_id: int
    doctor_id: int
    time_start: str
    time_end: str
    home_address: str = ""
    home_visit: bool = False
    online_appointment: bool = False
    clinic_appointment: bool = False


@dataclass
class PatientRequest:
    """What the clinic system needs to register a patient."""

    last_name: str
    first_name: str
    third_name: str
    birth_date: str
    phone: str


class Gateway(Protocol):
    """Operations offered by the clinic system; failures are raised."""

    def get_schedules_by_doctor_id(
        self, doctor_id: int, time_start: str, time_end: str
    ) -> dict[int, list[Schedule]]: ...

    def get_available_doctor_ids(
        self, doctor_ids: list[int], time_start: str, time_end: str
    ) -> list[int]: ...

    def get_schedules_many_doctors(
        self, doctor_ids: list[int], time_start: str, time_end: str
    ) -> list[Schedule]: ...

    def get_schedule_periods_by_doctor_id(
        self, doctor_id: int, time_start: str, time_end: str
    ) -> list[SchedulePeriod]: ...

    def create_appointment(self, request: CreateAppointmentRequest) -> Optional[int]: ...

    def cancel_appointment(self, moved_to: str, appointment_id: int) -> bool: ...

    def confirm_appointment(self, appointment_id: int) -> bool: ...

    def my_appointments(self, patient_id: int, registration_time: str) -> list[Appointment]: ...

    def detail_appointment(
        self, patient_id: int, appointment_id: int, registration_time: str
    ) -> Appointment: ...

    def get_doctors_by_speciality_id(self, speciality_id: int) -> list[Doctor]: ...

    def get_doctor_info(self, doctor_id: int) -> Doctor: ...

    def get_doctors(
        self, home_visit: bool, online_appointment: bool, clinic_appointment: bool
    ) -> list[Doctor]: ...

    def get_patient_by_id(self, patient_id: int) -> Any: ...

    def create_patient(self, request: PatientRequest) -> Optional[int]: ...

    def get_patient_by_birth_date(self, user: User) -> int: ...

    def get_specialities(self) -> list[Speciality]: ...


def _appointments_key(patient_id: int) -> str:
    return f"{patient_id}_appointments"


def _appointment_key(patient_id: int, appointment_id: int) -> str:
    return f"{patient_id}_{appointment_id}_appointment"


def _required_patient_id(user: User) -> int:
    if user.patient_id is None:
        raise ValueError(f"user {user.tg_id} has no patient id")
    return user.patient_id


class AppointmentServiceAdapter:
    """Translates domain requests to gateway calls and caches the answers."""

    def __init__(self, gateway: Gateway, cache: Optional[TTLCache] = None) -> None:
        self.gateway = gateway
        self.cache = cache if cache is not None else TTLCache(CACHE_CLEAN_PERIOD)

    # appointments

    def create_appointment(
        self,
        user: User,
        draft: DraftAppointment,
        doctor_id: int,
        time_start: str,
        time_end: str,
    ) -> Optional[int]:
        """Book an appointment of the draft's type and return its id."""
        patient_id = _required_patient_id(user)
        if draft.appointment_type is None:
            raise ValueError("draft appointment has no type")
        kind = AppointmentType(draft.appointment_type)
        request = CreateAppointmentRequest(
            patient_id=patient_id,
            doctor_id=doctor_id,
            time_start=time_start,
            time_end=time_end,
            home_address=user.home_address,
            home_visit=kind is AppointmentType.HOME,
            online_appointment=kind is AppointmentType.ONLINE,
            clinic_appointment=kind is AppointmentType.CLINIC,
        )
        appointment_id = self.gateway.create_appointment(request)
        self.cache.delete(_appointments_key(patient_id))
        return appointment_id

    def my_appointments(self, user: User) -> list[Appointment]:
        """Return the user's appointments, from cache when available; [] on failure."""
        if user.patient_id is None:
            return []
        key = _appointments_key(user.patient_id)
        cached = self.cache.get(key)
        if isinstance(cached, list) and cached:
            return list(cached)
        self.cache.delete(key)
        try:
            fetched = self.gateway.my_appointments(user.patient_id, user.registration_time)
        except Exception as err:
            logger.error("error fetching appointments of patient %s: %s", user.patient_id, err)
            return []
        return self._cache_my_appointments(user.patient_id, fetched)

    def _cache_my_appointments(
        self, patient_id: int, appointments: list[Appointment]
    ) -> list[Appointment]:
        result = list(appointments)
        for item in result:
            self.cache.set(
                _appointment_key(item.patient_id, item.id), item, APPOINTMENT_ITEM_TTL
            )
        self.cache.set(_appointments_key(patient_id), result, APPOINTMENT_LIST_TTL)
        return list(result)

    def cancel_appointment(self, user: User, appointment_id: int) -> bool:
        """Cancel an appointment and forget the cached copies of it."""
        patient_id = _required_patient_id(user)
        self.cache.delete(_appointments_key(patient_id))
        self.cache.delete(_appointment_key(patient_id, appointment_id))
        return self.gateway.cancel_appointment("", appointment_id)

    def confirm_appointment(self, appointment_id: int) -> bool:
        """Confirm an appointment."""
        return self.gateway.confirm_appointment(appointment_id)

    def detail_appointment(self, user: User, appointment_id: int) -> Appointment:
        """Return one appointment of the user, from cache when available."""
        patient_id = _required_patient_id(user)
        cached = self.cache.get(_appointment_key(patient_id, appointment_id))
        if isinstance(cached, Appointment):
            return cached
        appointment = self.gateway.detail_appointment(
            patient_id, appointment_id, user.registration_time
        )
        self.cache.set(
            _appointment_key(appointment.patient_id, appointment.id),
            appointment,
            APPOINTMENT_DETAIL_TTL,
        )
        return appointment

    def reschedule_appointment(self, user: User, moved_to: str, appointment_id: int) -> None:
        """The clinic system has no rescheduling call; only cached copies are dropped."""
        if user.patient_id is not None:
            self.cache.delete(_appointments_key(user.patient_id))
            self.cache.delete(_appointment_key(user.patient_id, appointment_id))

    # doctors

    def get_doctors_by_speciality_id(self, speciality_id: int) -> list[Doctor]:
        """Return the doctors of a speciality; [] on failure."""
        try:
            doctors = list(self.gateway.get_doctors_by_speciality_id(speciality_id))
        except Exception as err:
            logger.error("error fetching doctors of speciality %s: %s", speciality_id, err)
            return []
        self.cache.set("doctors", doctors, DOCTORS_TTL)
        return doctors

    def get_doctors(
        self, home_visit: bool, online_appointment: bool, clinic_appointment: bool
    ) -> list[Doctor]:
        """Return doctors offering the chosen kinds of appointment."""
        return list(self.gateway.get_doctors(home_visit, online_appointment, clinic_appointment))

    def get_doctor_info(self, doctor_id: int) -> Doctor:
        """Return a doctor, from cache when available; an empty Doctor on failure."""
        key = f"{doctor_id}_doctors"
        cached = self.cache.get(key)
        if isinstance(cached, Doctor):
            return cached
        try:
            doctor = self.gateway.get_doctor_info(doctor_id)
        except Exception as err:
            logger.error("error fetching doctor %s: %s", doctor_id, err)
            return Doctor()
        self.cache.set(key, doctor, DOCTORS_TTL)
        return doctor

    # schedules

    def get_schedules_by_doctor_id(
        self, doctor_id: int, time_start: str, time_end: str
    ) -> dict[int, list[Schedule]]:
        """Return schedules grouped by doctor, from cache when available."""
        key = f"{doctor_id}_schedules"
        cached = self.cache.get(key)
        if isinstance(cached, dict):
            return cached
        fetched = self.gateway.get_schedules_by_doctor_id(doctor_id, time_start, time_end)
        schedules = {doctor: list(items) for doctor, items in fetched.items()}
        self.cache.set(key, schedules, SCHEDULES_TTL)
        return schedules

    def get_schedules_many_doctors(
        self, doctor_ids: list[int], time_start: str, time_end: str
    ) -> list[Schedule]:
        """Return the schedules of several doctors; [] on failure."""
        try:
            return list(
                self.gateway.get_schedules_many_doctors(doctor_ids, time_start, time_end)
            )
        except Exception as err:
            logger.error("error fetching schedules of doctors %s: %s", doctor_ids, err)
            return []

    def get_available_doctor_ids(
        self, doctor_ids: list[int], time_start: str, time_end: str
    ) -> list[int]:
        """Return those of ``doctor_ids`` who work in the period."""
        return list(self.gateway.get_available_doctor_ids(doctor_ids, time_start, time_end))

    def get_schedule_periods_by_doctor_id(
        self, doctor_id: int, time_start: str, time_end: str
    ) -> list[SchedulePeriod]:
        """Return a doctor's working periods."""
        return list(
            self.gateway.get_schedule_periods_by_doctor_id(doctor_id, time_start, time_end)
        )

    # specialities

    def get_specialities(self) -> list[Speciality]:
        """Return all specialities; [] on failure."""
        try:
            specialities = list(self.gateway.get_specialities())
        except Exception as err:
            logger.error("error fetching specialities: %s", err)
            return []
        self.cache.set("specialities", specialities, SPECIALITIES_TTL)
        return specialities

    # patients

    def get_patient_by_id(self, patient_id: int) -> Any:
        """Return the patient record kept by the clinic system."""
        return self.gateway.get_patient_by_id(patient_id)

    def create_patient(self, user: User) -> Optional[int]:
        """Return the id of the user's patient record, creating it when none matches."""
        try:
            return self.gateway.get_patient_by_birth_date(user)
        except Exception:
            pass
        missing = [
            name
            for name, value in (
                ("last name", user.last_name),
                ("birth date", user.birth_date),
                ("phone", user.phone),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"user {user.tg_id} lacks: {', '.join(missing)}")
        request = PatientRequest(
            last_name=user.last_name,
            first_name=user.first_name,
            third_name=user.third_name,
            birth_date=user.birth_date,
            phone=user.phone,
        )
        return self.gateway.create_patient(request)