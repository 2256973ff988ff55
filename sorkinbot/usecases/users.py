"""Use cases that create users and change their stored fields."""

from __future__ import annotations

from typing import Protocol

from sorkinbot.entities import User

FULL_NAME_THIRD_PART = "."


class UserWriter(Protocol):
    """Storage operations on users."""

    def create_user(self, user: User) -> int: ...

    def update_user_state(self, user: User) -> None: ...

    def update_user_varchar_field(self, user: User, field: str, value: str) -> None: ...

    def update_user_patient_id(self, user: User, patient_id: int) -> None: ...

    def update_user_full_name(
        self, user: User, name: str, surname: str, third_name: str
    ) -> None: ...


class _UseCase:
    def __init__(self, write_repo: UserWriter) -> None:
        self.write_repo = write_repo


class CreateUser(_UseCase):
    """Store a new user and return the id the storage gave it."""

    def execute(self, user: User) -> int:
        return self.write_repo.create_user(user)


class ChangeLanguage(_UseCase):
    """Store the user's language, then their current state."""

    def execute(self, user: User, language_code: str) -> None:
        self.write_repo.update_user_varchar_field(user, "language_code", language_code)
        self.write_repo.update_user_state(user)


class ChangeState(_UseCase):
    """Store the user's current state."""

    def execute(self, user: User) -> None:
        self.write_repo.update_user_state(user)


class UpdateUserPhone(_UseCase):
    """Store the user's phone number."""

    def execute(self, user: User, phone: str) -> None:
        self.write_repo.update_user_varchar_field(user, "phone", phone)


class UpdateUserPatientId(_UseCase):
    """Store the user's patient id in the clinic system."""

    def execute(self, user: User, patient_id: int) -> None:
        self.write_repo.update_user_patient_id(user, patient_id)


class UpdateUserHomeAddress(_UseCase):
    """Store the user's home address."""

    def execute(self, user: User, home_address: str) -> None:
        self.write_repo.update_user_varchar_field(user, "home_address", home_address)


class UpdateUserBirthDate(_UseCase):
    """Store the user's birth date."""

    def execute(self, user: User, birth_date: str) -> None:
        self.write_repo.update_user_varchar_field(user, "birth_date", birth_date)


class UpdateUserFullName(_UseCase):
    """Split "Name Surname" and store both parts; the third name is set to "."."""

    def execute(self, user: User, full_name: str) -> None:
        parts = full_name.split(" ")
        if len(parts) < 2:
            raise ValueError(f"full name needs a name and a surname: {full_name!r}")
        name, surname = parts[0], parts[1]
        self.write_repo.update_user_full_name(user, name, surname, FULL_NAME_THIRD_PART)