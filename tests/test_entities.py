import datetime as dt

import pytest

from sorkinbot.entities import (
    Appointment,
    AppointmentType,
    Doctor,
    DraftAppointment,
    SchedulePeriod,
    User,
)


def test_appointment_type_values():
    assert AppointmentType.ONLINE.value == "online_appointment"
    assert AppointmentType("home_appointment") is AppointmentType.HOME
    assert AppointmentType("clinic_appointment") is AppointmentType.CLINIC


def test_appointment_type_unknown_value():
    with pytest.raises(ValueError):
        AppointmentType("nowhere")


def test_appointment_date_and_short_times():
    appt = Appointment(id=7, time_start="11.05.2004 12:00", time_end="11.05.2004 12:30")
    assert appt.date() == "11.05.2004"
    assert appt.time_start_short() == "12:00"
    assert appt.time_end_short() == "12:30"


def test_appointment_short_time_without_clock_part():
    appt = Appointment(time_start="11.05.2004")
    with pytest.raises(ValueError):
        appt.time_start_short()


def test_draft_appointment_defaults_are_unset():
    draft = DraftAppointment()
    assert draft.tg_id is None
    assert draft.appointment_type is None
    assert DraftAppointment(tg_id=5).tg_id == 5


def test_doctor_second_professions_not_shared():
    first = Doctor(id=1)
    second = Doctor(id=2)
    first.second_professions.append(3)
    assert second.second_professions == []
    assert first.info == ""


def test_schedule_period_day():
    period = SchedulePeriod(date="05.03.2024", doctor_id=1)
    assert period.day() == dt.date(2024, 3, 5)


def test_schedule_period_invalid_date_gives_none():
    assert SchedulePeriod(date="5.3.2024").day() is None
    assert SchedulePeriod(date="31.02.2024").day() is None


def test_schedule_period_malformed_date_raises():
    with pytest.raises(ValueError):
        SchedulePeriod(date="05.03").day()


def test_user_defaults_and_updates():
    user = User(tg_id=42, first_name="Ann")
    assert user.language_code is None
    assert user.home_address == ""
    user.state = "chooseDoctor"
    user.language_code = "EN"
    assert (user.state, user.language_code) == ("chooseDoctor", "EN")


def test_user_home_address_none_becomes_empty():
    assert User(tg_id=1, home_address=None).home_address == ""