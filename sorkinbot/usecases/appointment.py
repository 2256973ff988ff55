"""Use cases that change a user's draft appointment."""

from __future__ import annotations

from typing import Protocol

from sorkinbot.entities import DraftAppointment


class DraftAppointmentWriter(Protocol):
    """Storage operations on draft appointments."""

    def create_empty_draft_appointment(self, tg_id: int) -> None: ...

    def clean_draft_appointment(self, tg_id: int) -> None: ...

    def update_date_draft_appointment(
        self, tg_id: int, time_start: str, time_end: str, date: str
    ) -> None: ...

    def update_status_draft_appointment(self, tg_id: int, appointment_id: int) -> None: ...

    def update_int_draft_appointment(self, tg_id: int, value: int, field_name: str) -> None: ...

    def update_str_field_draft_appointment(
        self, tg_id: int, value: str, field_name: str
    ) -> None: ...

    def fast_update_draft_appointment(self, tg_id: int, draft: DraftAppointment) -> None: ...


class _UseCase:
    def __init__(self, write_repo: DraftAppointmentWriter) -> None:
        self.write_repo = write_repo


class CreateDraftAppointment(_UseCase):
    """Create an empty draft for a user."""

    def execute(self, tg_id: int) -> None:
        self.write_repo.create_empty_draft_appointment(tg_id)


class CleanDraftAppointment(_UseCase):
    """Reset every field of a user's draft."""

    def execute(self, tg_id: int) -> None:
        self.write_repo.clean_draft_appointment(tg_id)


class UpdateAppointmentDate(_UseCase):
    """Set the time range and date of a user's draft."""

    def execute(self, tg_id: int, time_start: str, time_end: str, date: str) -> None:
        self.write_repo.update_date_draft_appointment(tg_id, time_start, time_end, date)


class UpdateAppointmentStatus(_UseCase):
    """Turn a user's draft into a booked appointment."""

    def execute(self, tg_id: int, appointment_id: int) -> None:
        self.write_repo.update_status_draft_appointment(tg_id, appointment_id)


class UpdateIntAppointmentField(_UseCase):
    """Set an integer column of a user's draft."""

    def execute(self, tg_id: int, value: int, field_name: str) -> None:
        self.write_repo.update_int_draft_appointment(tg_id, value, field_name)


class UpdateStrAppointmentField(_UseCase):
    """Set a text column of a user's draft."""

    def execute(self, tg_id: int, value: str, field_name: str) -> None:
        self.write_repo.update_str_field_draft_appointment(tg_id, value, field_name)


class FastUpdateDraftAppointment(_UseCase):
    """Fill a draft with a doctor and slot in one go, inserting it when absent."""

    def execute(self, tg_id: int, draft: DraftAppointment, created: bool) -> None:
        if not created:
            self.write_repo.fast_update_draft_appointment(tg_id, draft)
            return
        if draft.doctor_id is None:
            raise ValueError("doctorId is nil")
        self.write_repo.update_int_draft_appointment(tg_id, draft.doctor_id, "doctor_id")
        if draft.time_start is None:
            raise ValueError("timeStart is nil")
        if draft.time_end is None:
            raise ValueError("timeEnd is nil")
        self.write_repo.update_date_draft_appointment(
            tg_id, draft.time_start, draft.time_end, draft.time_start.split(" ")[0]
        )