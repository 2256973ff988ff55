import pytest

from sorkinbot.entities import MessageLog, Speciality, User
from sorkinbot.tasks import SpecialityTranslationCheckTask, SupportCallsCheckTask


class FakeBot:
    def __init__(self):
        self.sent = []

    def send_message(self, chat_id, text):
        self.sent.append((chat_id, text))


class FakeUsers:
    def __init__(self, users=None, fail=()):
        self.users = users or {}
        self.fail = set(fail)

    def get_user(self, tg_id):
        if tg_id in self.fail:
            raise RuntimeError("no user")
        return self.users.get(tg_id, User())


class FakeAppointments:
    def __init__(self, untranslated, fail_specialities=False):
        self.untranslated = untranslated
        self.fail_specialities = fail_specialities
        self.seen = None

    def get_specialities(self):
        if self.fail_specialities:
            raise RuntimeError("gateway down")
        return [Speciality(id=1, name="x")]

    def get_translated_specialities(self, user, specialities, offset):
        self.seen = (user, list(specialities), offset)
        return {}, list(self.untranslated)


class FakeMessages:
    def __init__(self, logs):
        self.logs = logs
        self.minutes = None

    def get_support_logs(self, minutes):
        self.minutes = minutes
        return self.logs


def test_speciality_task_reports_untranslated():
    bot = FakeBot()
    admin = User(tg_id=42, language_code="RU")
    appointments = FakeAppointments(["Dr X", "Dr Y"])
    task = SpecialityTranslationCheckTask(appointments, FakeUsers({42: admin}), bot, admin_id=42)
    task.process()
    assert bot.sent == [(42, "untranslated speciality Dr X !"), (42, "untranslated speciality Dr Y !")]
    assert appointments.seen[0] is admin
    assert appointments.seen[2] == 0


def test_speciality_task_admin_error_is_reported():
    bot = FakeBot()
    task = SpecialityTranslationCheckTask(
        FakeAppointments([]), FakeUsers(fail={42}), bot, admin_id=42
    )
    with pytest.raises(RuntimeError):
        task.process()
    assert bot.sent == [(42, "error while getting admin in GetTranslatedSpecialityTask")]


def test_speciality_task_speciality_error_is_reported():
    bot = FakeBot()
    task = SpecialityTranslationCheckTask(
        FakeAppointments([], fail_specialities=True), FakeUsers(), bot, admin_id=42
    )
    with pytest.raises(RuntimeError):
        task.process()
    assert bot.sent == [(42, "error while getting speciality in GetTranslatedSpecialityTask")]


def test_speciality_task_reads_admin_from_env(monkeypatch):
    monkeypatch.setenv("ADMIN_ID", "77")
    bot = FakeBot()
    task = SpecialityTranslationCheckTask(FakeAppointments(["Dr Z"]), FakeUsers(), bot)
    task.process()
    assert bot.sent == [(77, "untranslated speciality Dr Z !")]


def test_speciality_task_without_admin(monkeypatch):
    monkeypatch.delenv("ADMIN_ID", raising=False)
    task = SpecialityTranslationCheckTask(FakeAppointments([]), FakeUsers(), FakeBot())
    with pytest.raises(RuntimeError):
        task.process()


def test_support_task_reports_calls_and_skips_unknown():
    bot = FakeBot()
    users = FakeUsers({5: User(tg_id=5, first_name="Ann", last_name="Lee")}, fail={6})
    messages = FakeMessages(
        [MessageLog(tg_message_id=1, user_tg_id=5, text="/tech_support"),
         MessageLog(tg_message_id=2, user_tg_id=6, text="/tech_support")]
    )
    task = SupportCallsCheckTask(bot, messages, users, admin_id=42, minutes=15)
    task.process()
    assert bot.sent == [(42, "tech_support call from Ann Lee tg_id: 5")]
    assert messages.minutes == 15


def test_support_task_reads_settings_from_env(monkeypatch):
    monkeypatch.setenv("ADMIN_ID", "9")
    monkeypatch.setenv("DEFAULT_CHECK_SUPPORT", "30")
    messages = FakeMessages([])
    bot = FakeBot()
    SupportCallsCheckTask(bot, messages, FakeUsers()).process()
    assert messages.minutes == 30
    assert bot.sent == []


def test_support_task_without_minutes(monkeypatch):
    monkeypatch.setenv("ADMIN_ID", "9")
    monkeypatch.setenv("DEFAULT_CHECK_SUPPORT", "soon")
    task = SupportCallsCheckTask(FakeBot(), FakeMessages([]), FakeUsers())
    with pytest.raises(RuntimeError):
        task.process()