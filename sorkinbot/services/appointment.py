"""Doctor lists, doctor details and schedules on top of the appointment core."""

from __future__ import annotations

import dataclasses
import datetime as _dt
import logging
import random
from typing import Optional

from sorkinbot.entities import AppointmentType, Doctor, Schedule, User
from sorkinbot.mapping import int_map_with_offset, sorted_int_map
from sorkinbot.services.appointment_core import AppointmentCore, translation_text
from sorkinbot.state_machine import PEDIATRICIAN, THERAPIST

logger = logging.getLogger(__name__)

FAST_APPOINTMENT_DOCTORS = 6
CHILD_HEALTH_TITLE = "детское здоровье"

_DOCTOR_FILTERS = {
    AppointmentType.ONLINE: (False, True, False),
    AppointmentType.CLINIC: (False, False, True),
    AppointmentType.HOME: (True, False, False),
}


def _doctor_names(doctors: list[Doctor], offset: int) -> dict[int, str]:
    names = {doctor.id: doctor.name for doctor in doctors}
    return int_map_with_offset(sorted_int_map(names), offset)


def _day_bounds(day: _dt.date) -> tuple[str, str]:
    prefix = f"{day.day:02d}.{day.month:02d}.{day.year}"
    return f"{prefix} 00:00", f"{prefix} 23:59"


class AppointmentService(AppointmentCore):
    """Everything the bot needs to pick a doctor and a slot."""

    # doctors

    def get_doctors_by_speciality_id(
        self, tg_id: int, offset: int, speciality_id: Optional[int] = None
    ) -> dict[int, str]:
        """Doctor names by id for a speciality (the draft's when not given), paged."""
        if speciality_id is None:
            try:
                draft = self.get_draft_appointment(tg_id)
            except Exception as err:
                logger.error("error: %s, reading draft of %s", err, tg_id)
                return {}
            speciality_id = draft.speciality_id
            if speciality_id is None:
                raise ValueError(f"draft of user {tg_id} has no speciality")
        doctors = self.mis_adapter.get_doctors_by_speciality_id(speciality_id)
        return _doctor_names(doctors, offset)

    def get_doctors(self, tg_id: int, offset: int) -> dict[int, str]:
        """Doctor names by id for the draft's kind of appointment, paged."""
        try:
            draft = self.read_draft_appointment_repo.get_user_draft_appointment(tg_id)
        except Exception as err:
            logger.error("error: %s, reading draft of %s", err, tg_id)
            return {}
        if draft is None or draft.appointment_type is None:
            return {}
        flags = _DOCTOR_FILTERS[AppointmentType(draft.appointment_type)]
        try:
            doctors = self.mis_adapter.get_doctors(*flags)
        except Exception as err:
            logger.error("error: %s, fetching doctors", err)
            doctors = []
        return _doctor_names(doctors, offset)

    def get_doctor_info(self, user: User, doctor_id: int) -> Doctor:
        """The doctor with ``info`` set to their second professions in the user's language."""
        doctor = self.mis_adapter.get_doctor_info(doctor_id)
        ids = list(doctor.second_professions)
        if not ids:
            raise LookupError("doctor not found")
        translations = self.read_message_repo.get_many_translations_by_ids(ids)
        if user.language_code is None:
            raise ValueError(f"user {user.tg_id} has no language code")
        info = ""
        for translation in translations:
            info = f"{translation_text(user.language_code, translation)} {info}"
        return dataclasses.replace(doctor, info=info)

    # schedules

    def get_fast_appointment_schedules(self) -> dict[int, Schedule]:
        """One slot for each of up to six randomly chosen doctors, by doctor id."""
        now = _dt.datetime.now()
        moment = f"{now.day + 1:02d}.{now.month:02d}.{now.year} {now.hour:02d}:{now.minute:02d}"
        try:
            schedules_map = self.mis_adapter.get_schedules_by_doctor_id(0, moment, moment)
        except Exception as err:
            logger.error("error: %s, fetching fast appointment schedules", err)
            return {}

        doctor_ids = list(schedules_map)
        known = set(doctor_ids)
        by_doctor: dict[int, list[Schedule]] = {}
        for items in schedules_map.values():
            for item in items:
                if item.doctor_id in known:
                    by_doctor.setdefault(item.doctor_id, []).append(item)

        random.shuffle(doctor_ids)
        chosen: dict[int, Schedule] = {}
        for doctor_id in doctor_ids[:FAST_APPOINTMENT_DOCTORS]:
            slots = by_doctor.get(doctor_id)
            if slots:
                chosen[doctor_id] = slots[0]
        return chosen

    def get_schedules_by_doctor_id(
        self, user: User, day_start: _dt.date, doctor_id: Optional[int] = None
    ) -> list[Schedule]:
        """A doctor's slots on ``day_start``; the draft's doctor when none is given."""
        time_start, time_end = _day_bounds(day_start)
        if doctor_id is None:
            draft = self.get_draft_appointment(user.tg_id)
            doctor_id = draft.doctor_id
            if doctor_id is None:
                raise ValueError(f"draft of user {user.tg_id} has no doctor")
        try:
            schedules = self.mis_adapter.get_schedules_by_doctor_id(
                doctor_id, time_start, time_end
            )
        except Exception as err:
            logger.error("error: %s, fetching schedules of doctor %s", err, doctor_id)
            raise
        return list(schedules.get(doctor_id, []))

    def get_schedule_periods_by_doctor_id(
        self, doctor_id: int, day_start: _dt.date
    ) -> dict[_dt.date, bool]:
        """The days from ``day_start`` to the end of its month on which the doctor works."""
        time_start = f"{day_start.day:02d}.{day_start.month:02d}.{day_start.year} 00:00"
        next_month, year = day_start.month + 1, day_start.year
        if next_month == 13:
            next_month, year = 1, year + 1
        time_end = f"01.{next_month:02d}.{year} 00:00"
        periods = self.mis_adapter.get_schedule_periods_by_doctor_id(
            doctor_id, time_start, time_end
        )
        working: dict[_dt.date, bool] = {}
        for period in periods:
            day = period.day()
            if day is not None:
                working[day] = True
        return working

    def get_schedules_to_home_visit(self, user: User, day_start: _dt.date) -> list[Schedule]:
        """Home-visit slots on ``day_start`` of paediatricians or therapists, by user state."""
        doctors = self.mis_adapter.get_doctors(True, False, False)
        if user.state is None:
            raise ValueError(f"user {user.tg_id} has no state")
        ids = [
            doctor.id
            for doctor in doctors
            if (user.state == PEDIATRICIAN and CHILD_HEALTH_TITLE in doctor.second_profession_titles)
            or (
                user.state == THERAPIST
                and CHILD_HEALTH_TITLE not in doctor.second_profession_titles
            )
        ]
        time_start, time_end = _day_bounds(day_start)
        available = self.mis_adapter.get_available_doctor_ids(ids, time_start, time_end)
        return self.mis_adapter.get_schedules_many_doctors(available, time_start, time_end)