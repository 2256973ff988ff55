"""Periodic tasks that report to the bot administrator."""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional, Protocol

from sorkinbot.entities import MessageLog, Speciality, User

logger = logging.getLogger(__name__)


class Bot(Protocol):
    """Sends text messages to a chat."""

    def send_message(self, chat_id: int, text: str) -> object: ...


class SpecialityReader(Protocol):
    def get_specialities(self) -> list[Speciality]: ...

    def get_translated_specialities(
        self, user: User, specialities: Iterable[Speciality], offset: int
    ) -> tuple[dict[int, str], list[str]]: ...


class UserReader(Protocol):
    def get_user(self, tg_id: int) -> User: ...


class SupportLogReader(Protocol):
    def get_support_logs(self, minutes: int) -> list[MessageLog]: ...


def _env_int(name: str) -> int:
    try:
        return int(os.environ[name])
    except (KeyError, ValueError):
        raise RuntimeError(f"{name} not found") from None


class SpecialityTranslationCheckTask:
    """Tells the administrator about specialities that have no translation."""

    def __init__(
        self,
        appointment_service: SpecialityReader,
        user_service: UserReader,
        bot: Bot,
        admin_id: Optional[int] = None,
    ) -> None:
        self.appointment_service = appointment_service
        self.user_service = user_service
        self.bot = bot
        self.admin_id = admin_id

    def process(self) -> None:
        """Run one check; the admin id comes from ADMIN_ID when not given."""
        admin_id = self.admin_id if self.admin_id is not None else _env_int("ADMIN_ID")
        try:
            admin = self.user_service.get_user(admin_id)
        except Exception:
            self.bot.send_message(
                admin_id, "error while getting admin in GetTranslatedSpecialityTask"
            )
            raise
        try:
            specialities = self.appointment_service.get_specialities()
        except Exception:
            self.bot.send_message(
                admin_id, "error while getting speciality in GetTranslatedSpecialityTask"
            )
            raise
        try:
            _, untranslated = self.appointment_service.get_translated_specialities(
                admin, specialities, 0
            )
        except Exception as err:
            logger.error("error translating specialities: %s", err)
            return
        for name in untranslated:
            self.bot.send_message(admin_id, f"untranslated speciality {name} !")


class SupportCallsCheckTask:
    """Tells the administrator about recent /tech_support calls."""

    def __init__(
        self,
        bot: Bot,
        message_service: SupportLogReader,
        user_service: UserReader,
        admin_id: Optional[int] = None,
        minutes: Optional[int] = None,
    ) -> None:
        self.bot = bot
        self.message_service = message_service
        self.user_service = user_service
        self.admin_id = admin_id
        self.minutes = minutes

    def process(self) -> None:
        """Run one check; ADMIN_ID and DEFAULT_CHECK_SUPPORT fill unset settings."""
        admin_id = self.admin_id if self.admin_id is not None else _env_int("ADMIN_ID")
        minutes = self.minutes if self.minutes is not None else _env_int("DEFAULT_CHECK_SUPPORT")
        for entry in self.message_service.get_support_logs(minutes):
            try:
                user = self.user_service.get_user(entry.user_tg_id)
            except Exception as err:
                logger.error("error reading user %s: %s", entry.user_tg_id, err)
                continue
            self.bot.send_message(
                admin_id,
                f"tech_support call from {user.first_name} {user.last_name or ''} "
                f"tg_id: {user.tg_id}",
            )