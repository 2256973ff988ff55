"""Registration of users and validated updates of their details."""

from __future__ import annotations

import datetime as _dt
import logging
import re
from typing import Optional, Protocol

from sorkinbot.entities import User
from sorkinbot.usecases.users import (
    ChangeLanguage,
    ChangeState,
    CreateUser,
    UpdateUserBirthDate,
    UpdateUserFullName,
    UpdateUserHomeAddress,
    UpdateUserPatientId,
    UpdateUserPhone,
)

logger = logging.getLogger(__name__)

_PHONE_RE = re.compile(r"\+?[1-9]\d{1,14}", re.ASCII)
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)


def is_valid_phone(phone: str) -> bool:
    """True for an optional "+" followed by 2 to 15 digits, the first not zero."""
    return _PHONE_RE.fullmatch(phone) is not None


def is_valid_full_name(name: str) -> bool:
    """True when the name is exactly two words separated by one space."""
    return len(name.split(" ")) == 2


def _normalized_date(year: int, month: int, day: int) -> Optional[_dt.datetime]:
    """Build a UTC midnight, carrying overflowing months and days; None if out of range."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        base = _dt.datetime(year, month, 1, tzinfo=_dt.timezone.utc)
        return base + _dt.timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def is_valid_birth_date(birth_date: str, now: Optional[_dt.datetime] = None) -> bool:
    """True for a "dd.mm.yyyy" string naming a moment before ``now``."""
    if now is None:
        now = _dt.datetime.now(_dt.timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=_dt.timezone.utc)

    if len(birth_date.encode()) != 10:
        return False
    items = birth_date.split(".")
    if len(items) != 3:
        return False
    if not all(_INT_RE.fullmatch(item) for item in items):
        return False
    day, month, year = (int(item) for item in items)

    moment = _normalized_date(year, month, day)
    if moment is None:
        return year < 1
    return moment < now


class UserReader(Protocol):
    def get_user_by_tg_id(self, tg_id: int) -> Optional[User]: ...


class UserService:
    """Reads users and applies validated changes through the use cases."""

    def __init__(
        self,
        create_user: CreateUser,
        change_language: ChangeLanguage,
        change_state: ChangeState,
        update_phone: UpdateUserPhone,
        update_home_address: UpdateUserHomeAddress,
        update_patient_id: UpdateUserPatientId,
        update_birth_date: UpdateUserBirthDate,
        update_full_name: UpdateUserFullName,
        read_repo: UserReader,
    ) -> None:
        self._create_user = create_user
        self._change_language = change_language
        self._change_state = change_state
        self._update_phone = update_phone
        self._update_home_address = update_home_address
        self._update_patient_id = update_patient_id
        self._update_birth_date = update_birth_date
        self._update_full_name = update_full_name
        self.read_repo = read_repo

    def _read(self, tg_id: int) -> User:
        try:
            user = self.read_repo.get_user_by_tg_id(tg_id)
        except Exception as err:
            logger.error("error: %s, reading user %s", err, tg_id)
            raise
        return user if user is not None else User()

    def get_user(self, tg_id: int) -> User:
        """Return the stored user; an unknown user comes back with tg_id 0."""
        return self._read(tg_id)

    def register_new_user(
        self,
        tg_id: int,
        first_name: str,
        last_name: Optional[str] = None,
        username: Optional[str] = None,
    ) -> User:
        """Return the user, storing them first when not yet registered."""
        user = self._read(tg_id)
        if user.tg_id != 0:
            logger.warning("user has registered")
            return user
        new_user = User(
            tg_id=tg_id, first_name=first_name, last_name=last_name, username=username
        )
        self._create_user.execute(new_user)
        return new_user

    def change_language(self, tg_id: int, language_code: str) -> User:
        """Store a new language for the user and return the updated user."""
        user = self._read(tg_id)
        self._change_language.execute(user, language_code)
        user.language_code = language_code
        return user

    def update_patient_id(self, user: User, patient_id: Optional[int]) -> None:
        """Store the user's patient id in the clinic system."""
        if patient_id is None:
            raise ValueError("patient id is missing")
        try:
            self._update_patient_id.execute(user, patient_id)
        except Exception as err:
            logger.error("error: %s, updating patient id", err)
            raise

    def update_home_address(self, user: User, home_address: str) -> None:
        """Store the user's home address."""
        try:
            self._update_home_address.execute(user, home_address)
        except Exception as err:
            logger.error("error: %s, updating home address", err)
            raise

    def change_state(self, tg_id: int, state: str) -> User:
        """Move the user to ``state``, store it, and return the user."""
        user = self._read(tg_id)
        user.state = state
        try:
            self._change_state.execute(user)
        except Exception as err:
            logger.error("error: %s, changing state", err)
            raise
        return user

    def _validated_update(self, tg_id, value, is_valid, use_case) -> tuple[User, bool]:
        user = self._read(tg_id)
        if not is_valid(value):
            return user, False
        try:
            use_case.execute(user, value)
        except Exception as err:
            logger.error("error: %s, updating user %s", err, tg_id)
            raise
        return user, True

    def update_phone(self, tg_id: int, phone: str) -> tuple[User, bool]:
        """Store a phone when valid; the flag tells whether it was stored."""
        return self._validated_update(tg_id, phone, is_valid_phone, self._update_phone)

    def update_full_name(self, tg_id: int, full_name: str) -> tuple[User, bool]:
        """Store "Name Surname" when valid; the flag tells whether it was stored."""
        return self._validated_update(
            tg_id, full_name, is_valid_full_name, self._update_full_name
        )

    def update_birth_date(self, tg_id: int, birth_date: str) -> tuple[User, bool]:
        """Store a "dd.mm.yyyy" birth date in the past; the flag tells whether it was stored."""
        return self._validated_update(
            tg_id, birth_date, is_valid_birth_date, self._update_birth_date
        )