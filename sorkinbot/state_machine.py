"""The dialogue states of a bot user and the allowed moves between them."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from sorkinbot.entities import User

logger = logging.getLogger(__name__)

START = ""
CHOOSE_LANGUAGE = "chooseLanguage"
CHOOSE_SPECIALITY = "chooseSpeciality"
FAST_APPOINTMENT = "fastAppointment"
CHOOSE_DOCTOR = "chooseDoctor"
CHOOSE_CALENDAR = "chooseCalendar"
CHOOSE_SCHEDULE = "chooseSchedule"
GET_PHONE = "getPhone"
GET_BIRTH_DATE = "getBirthDate"
GET_NAME = "getName"
CREATE_APPOINTMENT = "createAppointment"
DETAIL_MY_APPOINTMENT = "detailMyAppointment"
CANCEL_APPOINTMENT = "cancelAppointment"
CHOOSE_MY_APPOINTMENT = "chooseMyAppointment"
CHOOSE_APPOINTMENT = "chooseAppointment"
GET_DOCTOR_INFO = "getDoctorInfo"
CLINIC_APPOINTMENT = "clinicAppointment"
HOME_APPOINTMENT = "homeAppointment"
ONLINE_APPOINTMENT = "onlineAppointment"
PEDIATRICIAN = "pediatrician"
THERAPIST = "therapist"
SET_ADDRESS = "setAddress"

# event name -> (states it may be fired from, state it leads to)
TRANSITIONS: dict[str, tuple[frozenset[str], str]] = {
    CHOOSE_LANGUAGE: (frozenset({START}), CHOOSE_LANGUAGE),
    CHOOSE_SPECIALITY: (frozenset({START, CHOOSE_LANGUAGE}), CHOOSE_SPECIALITY),
    FAST_APPOINTMENT: (frozenset({START}), FAST_APPOINTMENT),
    CHOOSE_DOCTOR: (
        frozenset(
            {DETAIL_MY_APPOINTMENT, START, CHOOSE_SPECIALITY, FAST_APPOINTMENT, CREATE_APPOINTMENT}
        ),
        CHOOSE_DOCTOR,
    ),
    CHOOSE_SCHEDULE: (frozenset({START, CHOOSE_CALENDAR}), CHOOSE_SCHEDULE),
    GET_PHONE: (frozenset({CHOOSE_SCHEDULE}), GET_PHONE),
    GET_NAME: (frozenset({GET_PHONE}), GET_NAME),
    GET_BIRTH_DATE: (frozenset({GET_NAME}), GET_BIRTH_DATE),
    CREATE_APPOINTMENT: (
        frozenset({GET_NAME, CHOOSE_SCHEDULE, FAST_APPOINTMENT, GET_DOCTOR_INFO}),
        CREATE_APPOINTMENT,
    ),
    DETAIL_MY_APPOINTMENT: (
        frozenset({START, GET_DOCTOR_INFO, CHOOSE_MY_APPOINTMENT}),
        DETAIL_MY_APPOINTMENT,
    ),
    CHOOSE_MY_APPOINTMENT: (frozenset({START, GET_DOCTOR_INFO}), CHOOSE_MY_APPOINTMENT),
    CANCEL_APPOINTMENT: (frozenset({CHOOSE_MY_APPOINTMENT}), CANCEL_APPOINTMENT),
    START: (
        frozenset(
            {
                DETAIL_MY_APPOINTMENT,
                START,
                CHOOSE_LANGUAGE,
                CHOOSE_SPECIALITY,
                FAST_APPOINTMENT,
                CHOOSE_DOCTOR,
                CHOOSE_SCHEDULE,
                CREATE_APPOINTMENT,
                CANCEL_APPOINTMENT,
                CHOOSE_MY_APPOINTMENT,
                GET_DOCTOR_INFO,
            }
        ),
        START,
    ),
    CHOOSE_CALENDAR: (frozenset({CHOOSE_DOCTOR, START}), CHOOSE_CALENDAR),
    GET_DOCTOR_INFO: (
        frozenset(
            {
                GET_DOCTOR_INFO,
                CREATE_APPOINTMENT,
                CHOOSE_MY_APPOINTMENT,
                DETAIL_MY_APPOINTMENT,
                CHOOSE_DOCTOR,
                CHOOSE_SCHEDULE,
            }
        ),
        GET_DOCTOR_INFO,
    ),
    CHOOSE_APPOINTMENT: (frozenset({START}), CHOOSE_APPOINTMENT),
}


class InvalidTransition(Exception):
    """Raised when an event is unknown or not allowed from the current state."""


class StateChanger(Protocol):
    def change_state(self, tg_id: int, state: str) -> User: ...


class UserStateMachine:
    """Tracks a dialogue state and stores users' states through the user service."""

    def __init__(self, user_service: StateChanger, initial: str = START) -> None:
        self.user_service = user_service
        self.current = initial

    def can(self, event: str) -> bool:
        """True when ``event`` may be fired from the current state."""
        transition = TRANSITIONS.get(event)
        return transition is not None and self.current in transition[0]

    def fire(self, event: str) -> str:
        """Move along ``event`` and return the new state."""
        transition = TRANSITIONS.get(event)
        if transition is None:
            raise InvalidTransition(f"event {event!r} does not exist")
        sources, destination = transition
        if self.current not in sources:
            raise InvalidTransition(
                f"event {event!r} inappropriate in current state {self.current!r}"
            )
        self.current = destination
        return destination

    def set_state(self, user: User, to: str) -> Optional[User]:
        """Store ``to`` as the user's state; failures are logged and give None."""
        try:
            return self.user_service.change_state(user.tg_id, to)
        except Exception as err:
            logger.error("error changing state of user %s to %r: %s", user.tg_id, to, err)
            return None