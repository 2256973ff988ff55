"""Appointments, drafts, patients and speciality translations for bot users."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Union

from sorkinbot.entities import (
    Appointment,
    AppointmentType,
    DraftAppointment,
    Speciality,
    Translation,
    User,
)
from sorkinbot.mapping import int_map_with_offset, sorted_int_map
from sorkinbot.services.adapter import AppointmentServiceAdapter
from sorkinbot.usecases.appointment import (
    CleanDraftAppointment,
    CreateDraftAppointment,
    FastUpdateDraftAppointment,
    UpdateAppointmentDate,
    UpdateAppointmentStatus,
    UpdateIntAppointmentField,
    UpdateStrAppointmentField,
)

logger = logging.getLogger(__name__)

SPECIALITY_SLUG = "Дополнительно"


class TranslationReader(Protocol):
    """Stored translations of specialities and professions."""

    def get_translations_by_slug_key_slug(self, slug: str) -> dict[str, Translation]: ...

    def get_translations_by_source_id(self, source_id: int) -> Translation: ...

    def get_many_translations_by_ids(self, ids: list[int]) -> list[Translation]: ...


class DraftAppointmentReader(Protocol):
    """Stored draft appointments."""

    def get_user_draft_appointment(self, tg_id: int) -> Optional[DraftAppointment]: ...

    def get_draft_appointment_by_appointment_id(
        self, appointment_id: int
    ) -> Optional[DraftAppointment]: ...


class PatientIdUpdater(Protocol):
    def update_patient_id(self, user: User, patient_id: Optional[int]) -> None: ...


def translation_text(language_code: Optional[str], translation: Translation) -> str:
    """The translation's text in the given language ("RU", "EN", "PT"); "" otherwise."""
    texts = {
        "RU": translation.ru_text,
        "EN": translation.eng_text,
        "PT": translation.pt_br_text,
    }
    return texts.get(language_code or "", "")


def _part(items: list[str], index: int, what: str, source: str) -> str:
    if len(items) <= index:
        raise ValueError(f"malformed {what} in callback data: {source!r}")
    return items[index]


def _number(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"{what} is not a number: {text!r}") from None


def _callback_elements(callback_data: str) -> list[str]:
    elements = callback_data.split("__")
    if len(elements) < 3:
        raise ValueError(f"malformed callback data: {callback_data!r}")
    return elements


def _callback_doctor_id(callback_data: str) -> int:
    first = _callback_elements(callback_data)[0]
    return _number(_part(first.split("_"), 1, "doctor id", callback_data), "doctor id")


def _convert_time(raw: str, date_source: str, callback_data: str) -> tuple[int, int, int, int, int]:
    date_items = _part(date_source.split(" "), 0, "date", callback_data).split("-")
    year = _number(_part(date_items, 0, "year", callback_data), "year")
    month = _number(_part(date_items, 1, "month", callback_data), "month")
    day = _number(_part(date_items, 2, "day", callback_data), "day")
    clock = _part(raw.split(" "), 1, "time", callback_data).split(":")
    hour = _number(_part(clock, 0, "hour", callback_data), "hour")
    minute = _number(_part(clock, 1, "minute", callback_data), "minute")
    return day, month, year, hour, minute


def convert_callback_times(callback_data: str) -> tuple[str, str]:
    """Turn "doctorId_<id>__timeStart_<yyyy-mm-dd hh:mm>__timeEnd_<...>" into
    ("dd.mm.yyyy hh:mm", "dd.mm.yyyy hh:mm"); both use the start's date."""
    elements = _callback_elements(callback_data)
    start_raw = _part(elements[1].split("_"), 1, "start time", callback_data)
    end_raw = _part(elements[2].split("_"), 1, "end time", callback_data)

    day, month, year, hour_start, minute_start = _convert_time(
        start_raw, start_raw, callback_data
    )
    _, _, _, hour_end, minute_end = _convert_time(end_raw, start_raw, callback_data)

    start = f"{day:02d}.{month:02d}.{year:04d} {hour_start:02d}:{minute_start:02d}"
    end = f"{day:02d}.{month:02d}.{year:04d} {hour_end:02d}:{minute_end:02d}"
    return start, end


def _language(user: User) -> str:
    if user.language_code is None:
        raise ValueError(f"user {user.tg_id} has no language code")
    return user.language_code


class AppointmentCore:
    """Booking, draft handling, patient registration and speciality translation."""

    def __init__(
        self,
        mis_adapter: AppointmentServiceAdapter,
        read_message_repo: TranslationReader,
        read_draft_appointment_repo: DraftAppointmentReader,
        user_service: PatientIdUpdater,
        create_draft_appointment: CreateDraftAppointment,
        update_draft_appointment_date: UpdateAppointmentDate,
        update_draft_appointment_status: UpdateAppointmentStatus,
        update_draft_appointment_int_field: UpdateIntAppointmentField,
        update_draft_appointment_str_field: UpdateStrAppointmentField,
        clean_draft_appointment: CleanDraftAppointment,
        fast_update_draft_appointment: FastUpdateDraftAppointment,
    ) -> None:
        self.mis_adapter = mis_adapter
        self.read_message_repo = read_message_repo
        self.read_draft_appointment_repo = read_draft_appointment_repo
        self.user_service = user_service
        self._create_draft = create_draft_appointment
        self._update_date = update_draft_appointment_date
        self._update_status = update_draft_appointment_status
        self._update_int_field = update_draft_appointment_int_field
        self._update_str_field = update_draft_appointment_str_field
        self._clean_draft = clean_draft_appointment
        self._fast_update = fast_update_draft_appointment

    # appointments

    def get_appointments(self, user: User) -> list[Appointment]:
        """The user's appointments; [] when the user is not a patient yet."""
        if user.patient_id is None:
            return []
        return self.mis_adapter.my_appointments(user)

    def get_appointment_detail(self, user: User, appointment_id: int) -> Appointment:
        """One appointment of the user; an empty Appointment when unavailable."""
        if user.patient_id is None:
            return Appointment()
        try:
            return self.mis_adapter.detail_appointment(user, appointment_id)
        except Exception as err:
            logger.error("error: %s, getting appointment %s", err, appointment_id)
            return Appointment()

    def create_appointment(
        self, user: User, draft: DraftAppointment, callback_data: str
    ) -> Optional[int]:
        """Book the slot named in ``callback_data``; None when it cannot be booked."""
        if user.patient_id is None:
            return None
        doctor_id = _callback_doctor_id(callback_data)
        time_start, time_end = convert_callback_times(callback_data)
        try:
            return self.mis_adapter.create_appointment(
                user, draft, doctor_id, time_start, time_end
            )
        except Exception as err:
            logger.error("error: %s, creating appointment", err)
            return None

    def confirm_appointment(self, appointment_id: int) -> bool:
        """True when the clinic system accepted the confirmation call."""
        try:
            self.mis_adapter.confirm_appointment(appointment_id)
        except Exception as err:
            logger.error("error: %s, confirming appointment %s", err, appointment_id)
            return False
        return True

    def cancel_appointment(self, user: User, appointment_id: int) -> bool:
        """True when the clinic system accepted the cancellation call."""
        try:
            self.mis_adapter.cancel_appointment(user, appointment_id)
        except Exception as err:
            logger.error("error: %s, cancelling appointment %s", err, appointment_id)
            return False
        return True

    def reschedule_appointment(self, user: User, appointment_id: int, moved_to: str) -> bool:
        """True when the rescheduling call succeeded."""
        try:
            self.mis_adapter.reschedule_appointment(user, moved_to, appointment_id)
        except Exception as err:
            logger.error("error: %s, rescheduling appointment %s", err, appointment_id)
            return False
        return True

    # drafts

    def get_draft_appointment(self, tg_id: int) -> DraftAppointment:
        """The user's draft; an empty draft when there is none."""
        draft = self.read_draft_appointment_repo.get_user_draft_appointment(tg_id)
        return draft if draft is not None else DraftAppointment()

    def create_draft_appointment(self, tg_id: int) -> None:
        """Create an empty draft unless the user already has one."""
        try:
            draft = self.get_draft_appointment(tg_id)
        except Exception as err:
            logger.error("error: %s, reading draft of %s", err, tg_id)
            return
        if draft.tg_id is not None:
            return
        try:
            self._create_draft.execute(tg_id)
        except Exception as err:
            logger.error("error: %s, creating draft of %s", err, tg_id)

    def update_draft_appointment_status(self, tg_id: int, appointment_id: int) -> None:
        """Mark the draft as booked under ``appointment_id``."""
        try:
            self._update_status.execute(tg_id, appointment_id)
        except Exception as err:
            logger.error("error: %s, updating draft status of %s", err, tg_id)

    def update_draft_appointment_date(
        self, tg_id: int, time_start: str, time_end: str, date: str
    ) -> None:
        """Set the draft's time range and date."""
        try:
            self._update_date.execute(tg_id, time_start, time_end, date)
        except Exception as err:
            logger.error("error: %s, updating draft date of %s", err, tg_id)

    def update_draft_appointment_int_field(self, tg_id: int, value: int, field_name: str) -> None:
        """Set an integer field of the draft."""
        try:
            self._update_int_field.execute(tg_id, value, field_name)
        except Exception as err:
            logger.error("error: %s, updating draft field %s of %s", err, field_name, tg_id)

    def update_draft_appointment_doctor_name(self, tg_id: int, doctor_id: int) -> None:
        """Store the name of the chosen doctor in the draft."""
        doctor = self.mis_adapter.get_doctor_info(doctor_id)
        try:
            self._update_str_field.execute(tg_id, doctor.name, "doctor_name")
        except Exception as err:
            logger.error("error: %s, updating draft doctor name of %s", err, tg_id)

    def clean_draft_appointment(self, tg_id: int) -> None:
        """Reset every field of the draft."""
        try:
            self._clean_draft.execute(tg_id)
        except Exception as err:
            logger.error("error: %s, cleaning draft of %s", err, tg_id)

    def fast_update_draft_appointment(
        self, tg_id: int, speciality_id: int, doctor_id: int, time_start: str, time_end: str
    ) -> None:
        """Fill the draft with a doctor and slot, creating the draft when absent."""
        draft = DraftAppointment(
            speciality_id=speciality_id,
            doctor_id=doctor_id,
            tg_id=tg_id,
            time_start=time_start,
            time_end=time_end,
        )
        try:
            old = self.read_draft_appointment_repo.get_user_draft_appointment(tg_id)
        except Exception as err:
            logger.error("error: %s, reading draft of %s", err, tg_id)
            return
        created = old is not None and old.tg_id is not None
        try:
            self._fast_update.execute(tg_id, draft, created)
        except Exception as err:
            logger.error("fast update draft appointment failed: %s", err)

    def get_draft_appointment_by_appointment_id(self, appointment_id: int) -> DraftAppointment:
        """The draft that was booked as ``appointment_id``; empty when none."""
        draft = self.read_draft_appointment_repo.get_draft_appointment_by_appointment_id(
            appointment_id
        )
        return draft if draft is not None else DraftAppointment()

    def update_draft_appointment_type(
        self, tg_id: int, appointment_type: Union[AppointmentType, str]
    ) -> None:
        """Store where the appointment takes place."""
        value = AppointmentType(appointment_type).value
        try:
            self._update_str_field.execute(tg_id, value, "type")
        except Exception as err:
            logger.error("error: %s, updating draft type of %s", err, tg_id)

    # patients

    def get_patient(self, user: User) -> bool:
        """True when the user's patient record exists in the clinic system."""
        if user.patient_id is None:
            return False
        try:
            self.mis_adapter.get_patient_by_id(user.patient_id)
        except Exception as err:
            logger.error("error: %s, getting patient %s", err, user.patient_id)
            return False
        return True

    def create_patient(self, user: User) -> bool:
        """Make sure the user has a patient record and that its id is stored."""
        if self.get_patient(user):
            return True
        try:
            patient_id = self.mis_adapter.create_patient(user)
        except Exception as err:
            logger.error("error: %s, creating patient for %s", err, user.tg_id)
            return False
        try:
            self.user_service.update_patient_id(user, patient_id)
        except Exception as err:
            logger.error("error: %s, storing patient id for %s", err, user.tg_id)
            return False
        return True

    # specialities

    def get_specialities(self) -> list[Speciality]:
        """All specialities offered by the clinic."""
        return self.mis_adapter.get_specialities()

    def get_translated_specialities(
        self, user: User, specialities: Iterable[Speciality], offset: int
    ) -> tuple[dict[int, str], list[str]]:
        """Translated names by speciality id, paged from ``offset``, and the doctor
        names of specialities that have no translation."""
        translations = self.read_message_repo.get_translations_by_slug_key_slug(SPECIALITY_SLUG)
        language = _language(user)
        translated: dict[int, str] = {}
        untranslated: list[str] = []
        for speciality in specialities:
            translation = translations.get(speciality.name)
            if translation is None and speciality.name != "":
                logger.error(
                    "untranslated speciality: %s, please translate this in priority",
                    speciality.doctor_name,
                )
                untranslated.append(speciality.doctor_name)
            if translation is None:
                continue
            text = translation_text(language, translation)
            if text == "" or not translation.uses:
                continue
            translated[speciality.id] = text
        return int_map_with_offset(sorted_int_map(translated), offset), untranslated

    def translate_speciality_by_id(self, user: User, speciality_id: int) -> str:
        """The name of one speciality in the user's language."""
        translation = self.read_message_repo.get_translations_by_source_id(speciality_id)
        return translation_text(_language(user), translation)

    def translate_many_by_ids(self, user: User, ids: list[int]) -> dict[int, str]:
        """Names of several specialities in the user's language, by id."""
        translations = self.read_message_repo.get_many_translations_by_ids(ids)
        language = _language(user)
        return {
            translation.source_id: translation_text(language, translation)
            for translation in translations
            if translation.source_id is not None
        }