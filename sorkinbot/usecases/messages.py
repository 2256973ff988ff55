"""Use cases about Telegram messages."""

from __future__ import annotations

from typing import Protocol

from sorkinbot.entities import MessageLog


class MessageLogWriter(Protocol):
    """Storage for message logs."""

    def create_message_log(self, message_log: MessageLog) -> None: ...


class SaveMessageLog:
    """Store one message log entry."""

    def __init__(self, write_repo: MessageLogWriter) -> None:
        self.write_repo = write_repo

    def execute(self, message_log: MessageLog) -> None:
        self.write_repo.create_message_log(message_log)