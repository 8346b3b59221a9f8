"""
Telegram relay for gotobed.

PURPOSE: Long-poll the Telegram Bot API and pass message text to a handler.
AI CONTEXT: Transport only - command semantics live in commands.py.

STATE:
- chat_id: persisted in telegram.json via StorageManager; loaded when the
  relay is created and saved whenever a message arrives from a new chat
- offset: next update id to request; process-local, kept on the relay

ERROR HANDLING:
Network and API errors are logged per poll and the loop carries on; a
failed reply never stops the relay. A command that raises gets an error
reply and the rest of its batch is still handled.

USAGE:
    relay = TelegramRelay(token, storage)
    relay.run(handler.handle)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import requests

from .config import Config

if TYPE_CHECKING:
    from .storage import StorageManager

__all__ = ["TelegramRelay"]

logger = logging.getLogger(__name__)

REQUEST_SLACK = 10
"""Seconds added to the long-poll timeout for the HTTP read timeout."""


class TelegramRelay:
    """
    Minimal Telegram Bot API client.

    Only text messages are relayed; updates without text are skipped but
    still advance the offset so they are not fetched again.
    """

    def __init__(
        self,
        token: str,
        storage: StorageManager,
        session: requests.Session | None = None,
        poll_timeout: int | None = None,
    ) -> None:
        """
        Args:
            token: Bot token from GOTOBED_TELEGRAM_TOKEN.
            storage: StorageManager holding the relay context.
            session: Optional requests.Session for testability.
            poll_timeout: Long-poll seconds. Default: Config.POLL_TIMEOUT
        """
        self.api_url = f"{Config.TELEGRAM_API_BASE}/bot{token}"
        self.storage = storage
        self.session = session or requests.Session()
        self.poll_timeout = poll_timeout if poll_timeout is not None else Config.POLL_TIMEOUT
        self.offset = 0
        self.context = storage.load_context()

    def send(self, text: str) -> bool:
        """
        Send text to the last known chat.

        Returns:
            True if Telegram accepted the message. False (with a log line)
            when no chat is known yet or the request failed.
        """
        if self.context.chat_id is None:
            logger.error("Could not send Telegram message: no known chat id stored")
            return False
        try:
            response = self.session.post(
                f"{self.api_url}/sendMessage",
                json={"chat_id": self.context.chat_id, "text": text, "parse_mode": "HTML"},
                timeout=REQUEST_SLACK,
            )
            response.raise_for_status()
            return True
        except requests.exceptions.RequestException as e:
            logger.error(f"Could not send Telegram message: call to Telegram API failed: {e}")
            return False

    def get_updates(self) -> list[dict[str, Any]]:
        """
        Long-poll for new message updates.

        Returns:
            Updates sorted by update_id.

        Raises:
            requests.exceptions.RequestException: On network or HTTP errors.
            ValueError: If the response body is not the expected JSON.
        """
        response = self.session.get(
            f"{self.api_url}/getUpdates",
            params={
                "offset": self.offset,
                "timeout": self.poll_timeout,
                "allowed_updates": '["message"]',
            },
            timeout=self.poll_timeout + REQUEST_SLACK,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or not isinstance(payload.get("result"), list):
            raise ValueError(f"unexpected getUpdates payload: {payload!r}")
        return sorted(payload["result"], key=lambda update: update["update_id"])

    def poll_once(self, handler: Callable[[str], str]) -> int:
        """
        Fetch one batch of updates, answer each text message.

        The offset moves past the newest update and the chat id of the
        newest message is remembered (and saved if it changed) before any
        reply is sent.

        Args:
            handler: Maps message text to reply text.

        Returns:
            Number of messages handled.
        """
        updates = self.get_updates()
        if not updates:
            return 0

        latest = updates[-1]
        self.offset = latest["update_id"] + 1
        chat_id = latest.get("message", {}).get("chat", {}).get("id")
        if chat_id is not None and self.context.update_chat_id(chat_id):
            logger.info(f"Active chat id changed to {chat_id}")
            self.storage.save_context(self.context)

        handled = 0
        for update in updates:
            logger.debug(f"Telegram update: {update}")
            text = update.get("message", {}).get("text")
            if text is None:
                continue
            logger.info(f"Received Telegram message: {text}")
            try:
                reply = handler(text)
            except Exception as e:
                logger.error(f"Error handling {text!r}: {e}")
                reply = f"Command failed: {e}"
            self.send(reply)
            handled += 1
        return handled

    def run(
        self,
        handler: Callable[[str], str],
        max_polls: int | None = None,
        retry_delay: float = 5.0,
    ) -> None:
        """
        Poll forever (or max_polls times), logging errors between polls.

        Args:
            handler: Maps message text to reply text.
            max_polls: Stop after this many polls. None runs until interrupted.
            retry_delay: Seconds to wait after a failed poll.
        """
        logger.info("Starting Telegram polling loop")
        polls = 0
        while max_polls is None or polls < max_polls:
            polls += 1
            try:
                self.poll_once(handler)
            except (requests.exceptions.RequestException, ValueError, KeyError) as e:
                logger.error(f"Telegram: error retrieving updates: {e}")
                time.sleep(retry_delay)
