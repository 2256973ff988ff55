import datetime as dt

import pytest

from sorkinbot.entities import User
from sorkinbot.services.user import (
    UserService,
    is_valid_birth_date,
    is_valid_full_name,
    is_valid_phone,
)
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

NOW = dt.datetime(2024, 6, 1, tzinfo=dt.timezone.utc)


class FakeWriter:
    def __init__(self):
        self.calls = []

    def create_user(self, user):
        self.calls.append(("create_user", user.tg_id, user.first_name))
        return 1

    def update_user_state(self, user):
        self.calls.append(("update_user_state", user.tg_id, user.state))

    def update_user_varchar_field(self, user, field, value):
        self.calls.append(("varchar", user.tg_id, field, value))

    def update_user_patient_id(self, user, patient_id):
        self.calls.append(("patient_id", user.tg_id, patient_id))

    def update_user_full_name(self, user, name, surname, third_name):
        self.calls.append(("full_name", user.tg_id, name, surname, third_name))


class FakeReader:
    def __init__(self, users=None, fail=False):
        self.users = users or {}
        self.fail = fail

    def get_user_by_tg_id(self, tg_id):
        if self.fail:
            raise RuntimeError("db down")
        return self.users.get(tg_id)


def make_service(users=None, fail=False):
    writer = FakeWriter()
    service = UserService(
        CreateUser(writer),
        ChangeLanguage(writer),
        ChangeState(writer),
        UpdateUserPhone(writer),
        UpdateUserHomeAddress(writer),
        UpdateUserPatientId(writer),
        UpdateUserBirthDate(writer),
        UpdateUserFullName(writer),
        FakeReader(users, fail),
    )
    return service, writer


@pytest.mark.parametrize(
    "phone, valid",
    [("+1234", True), ("1" * 15, True), ("1" * 16, False), ("0123", False),
     ("+", False), ("1", False), ("12a", False), ("12\n", False)],
)
def test_is_valid_phone(phone, valid):
    assert is_valid_phone(phone) is valid


@pytest.mark.parametrize(
    "name, valid",
    [("John Smith", True), ("John", False), ("A B C", False), ("John  Smith", False)],
)
def test_is_valid_full_name(name, valid):
    assert is_valid_full_name(name) is valid


@pytest.mark.parametrize(
    "birth_date, valid",
    [
        ("01.01.2000", True),
        ("01.01.2030", False),
        ("1.1.2000", False),
        ("aa.bb.cccc", False),
        ("01-01-2000", False),
        ("31.05.2024", True),
        ("32.05.2024", False),
        ("00.13.2023", True),
    ],
)
def test_is_valid_birth_date(birth_date, valid):
    assert is_valid_birth_date(birth_date, NOW) is valid


def test_is_valid_birth_date_naive_now_treated_as_utc():
    assert is_valid_birth_date("31.05.2024", dt.datetime(2024, 6, 1)) is True


def test_get_unknown_user_has_zero_id():
    service, _ = make_service()
    assert service.get_user(5).tg_id == 0


def test_register_existing_user_does_not_create():
    existing = User(tg_id=5, first_name="Ann")
    service, writer = make_service({5: existing})
    assert service.register_new_user(5, "Other") is existing
    assert writer.calls == []


def test_register_new_user_creates():
    service, writer = make_service()
    user = service.register_new_user(8, "Bob", "Brown", "bob")
    assert (user.tg_id, user.last_name, user.username) == (8, "Brown", "bob")
    assert writer.calls == [("create_user", 8, "Bob")]


def test_change_language_sets_code():
    service, writer = make_service({5: User(tg_id=5, first_name="Ann")})
    user = service.change_language(5, "PT")
    assert user.language_code == "PT"
    assert writer.calls[0] == ("varchar", 5, "language_code", "PT")


def test_change_state_stores_new_state():
    service, writer = make_service({5: User(tg_id=5, first_name="Ann")})
    user = service.change_state(5, "getPhone")
    assert user.state == "getPhone"
    assert writer.calls == [("update_user_state", 5, "getPhone")]


def test_update_phone_invalid_skips_write():
    service, writer = make_service({5: User(tg_id=5)})
    user, stored = service.update_phone(5, "abc")
    assert (user.tg_id, stored) == (5, False)
    assert writer.calls == []


def test_update_phone_valid_writes():
    service, writer = make_service({5: User(tg_id=5)})
    _, stored = service.update_phone(5, "+1234")
    assert stored is True
    assert writer.calls == [("varchar", 5, "phone", "+1234")]


def test_update_full_name_writes_parts():
    service, writer = make_service({5: User(tg_id=5)})
    _, stored = service.update_full_name(5, "John Smith")
    assert stored is True
    assert writer.calls == [("full_name", 5, "John", "Smith", ".")]


def test_update_birth_date_future_rejected():
    service, writer = make_service({5: User(tg_id=5)})
    _, stored = service.update_birth_date(5, "01.01.9999")
    assert stored is False
    assert writer.calls == []


def test_update_home_address_and_patient_id():
    user = User(tg_id=5)
    service, writer = make_service()
    service.update_home_address(user, "Main street")
    service.update_patient_id(user, 77)
    assert writer.calls == [("varchar", 5, "home_address", "Main street"), ("patient_id", 5, 77)]


def test_update_patient_id_none_raises():
    service, _ = make_service()
    with pytest.raises(ValueError):
        service.update_patient_id(User(tg_id=5), None)


def test_reader_error_propagates():
    service, _ = make_service(fail=True)
    with pytest.raises(RuntimeError, match="db down"):
        service.update_phone(5, "+1234")