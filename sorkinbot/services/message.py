"""Localised bot messages, weekday names and support-call logs."""

from __future__ import annotations

import logging
from typing import Protocol

from sorkinbot.entities import Message, MessageLog, Translation, User

logger = logging.getLogger(__name__)

SERVER_ERROR = "500 INTERNAL SERVER ERROR, please call /tech_support"


class TranslationError(Exception):
    """Raised when a message cannot be shown in the user's language."""

    def __init__(self, message: str = SERVER_ERROR) -> None:
        super().__init__(message)


class MessageReader(Protocol):
    def get_message_by_name(self, name: str) -> Message: ...

    def get_weekday_names(self) -> list[Message]: ...


class MessageLogReader(Protocol):
    def get_support_logs_by_minutes(self, minutes: int) -> list[MessageLog]: ...


class TranslationReader(Protocol):
    def get_translations_by_slug_key_profession(self, slug: str) -> dict[str, Translation]: ...


def _translate(user: User, message: Message) -> str:
    code = user.language_code
    if code is None:
        return message.eng_text
    texts = {"RU": message.ru_text, "EN": message.eng_text, "PT": message.pt_br_text}
    try:
        return texts[code]
    except KeyError:
        raise TranslationError() from None


class MessageService:
    """Reads stored messages and logs and picks the user's language."""

    def __init__(
        self,
        read_repo: MessageReader,
        read_logs_repo: MessageLogReader,
        read_translation_storage: TranslationReader,
    ) -> None:
        self.read_repo = read_repo
        self.read_logs_repo = read_logs_repo
        self.read_translation_storage = read_translation_storage

    def get_message(self, user: User, name: str) -> str:
        """Return the message called ``name`` in the user's language."""
        try:
            message = self.read_repo.get_message_by_name(name)
            return _translate(user, message)
        except Exception as err:
            logger.error("400 Message Not Found err: %s, message_name: %s", err, name)
            raise

    def get_weekday_names(self, user: User) -> list[str]:
        """Return the weekday names in the user's language."""
        try:
            return [_translate(user, day) for day in self.read_repo.get_weekday_names()]
        except Exception as err:
            logger.error("400 Message Not Found err: %s", err)
            raise

    def get_support_logs(self, minutes: int) -> list[MessageLog]:
        """Return support calls logged in the last ``minutes`` minutes."""
        return self.read_logs_repo.get_support_logs_by_minutes(minutes)

    def get_translations_by_profession(self, slug: str) -> dict[str, Translation]:
        """Return translations whose slug starts with ``slug``, keyed by profession."""
        return self.read_translation_storage.get_translations_by_slug_key_profession(slug)