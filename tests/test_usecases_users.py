import pytest

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


class FakeWriter:
    def __init__(self, new_id=7, fail_on=None):
        self.calls = []
        self.new_id = new_id
        self.fail_on = fail_on

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name == self.fail_on:
            raise RuntimeError(f"{name} failed")

    def create_user(self, user):
        self._record("create_user", user)
        return self.new_id

    def update_user_state(self, user):
        self._record("update_user_state", user.state)

    def update_user_varchar_field(self, user, field, value):
        self._record("update_user_varchar_field", user.tg_id, field, value)

    def update_user_patient_id(self, user, patient_id):
        self._record("update_user_patient_id", user.tg_id, patient_id)

    def update_user_full_name(self, user, name, surname, third_name):
        self._record("update_user_full_name", user.tg_id, name, surname, third_name)


@pytest.fixture
def user():
    return User(tg_id=42, first_name="John", state="chooseLanguage")


def test_create_user_returns_id(user):
    writer = FakeWriter(new_id=99)
    assert CreateUser(writer).execute(user) == 99
    assert writer.calls == [("create_user", user)]


def test_change_language_writes_language_then_state(user):
    writer = FakeWriter()
    ChangeLanguage(writer).execute(user, "RU")
    assert writer.calls == [
        ("update_user_varchar_field", 42, "language_code", "RU"),
        ("update_user_state", "chooseLanguage"),
    ]


def test_change_language_stops_on_error(user):
    writer = FakeWriter(fail_on="update_user_varchar_field")
    with pytest.raises(RuntimeError):
        ChangeLanguage(writer).execute(user, "EN")
    assert [call[0] for call in writer.calls] == ["update_user_varchar_field"]


def test_change_state(user):
    writer = FakeWriter()
    ChangeState(writer).execute(user)
    assert writer.calls == [("update_user_state", "chooseLanguage")]


@pytest.mark.parametrize(
    "use_case, field",
    [
        (UpdateUserPhone, "phone"),
        (UpdateUserHomeAddress, "home_address"),
        (UpdateUserBirthDate, "birth_date"),
    ],
)
def test_varchar_updates(user, use_case, field):
    writer = FakeWriter()
    use_case(writer).execute(user, "value")
    assert writer.calls == [("update_user_varchar_field", 42, field, "value")]


def test_update_patient_id(user):
    writer = FakeWriter()
    UpdateUserPatientId(writer).execute(user, 555)
    assert writer.calls == [("update_user_patient_id", 42, 555)]


def test_update_full_name_splits(user):
    writer = FakeWriter()
    UpdateUserFullName(writer).execute(user, "John Smith")
    assert writer.calls == [("update_user_full_name", 42, "John", "Smith", ".")]


def test_update_full_name_without_surname_raises(user):
    writer = FakeWriter()
    with pytest.raises(ValueError):
        UpdateUserFullName(writer).execute(user, "John")
    assert writer.calls == []


def test_write_error_propagates(user):
    writer = FakeWriter(fail_on="update_user_patient_id")
    with pytest.raises(RuntimeError, match="failed"):
        UpdateUserPatientId(writer).execute(user, 1)