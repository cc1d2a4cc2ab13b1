"""
Telegram Log Handler

Logging handler that forwards warnings and errors to a Telegram chat.
"""

import asyncio
import logging
from html import escape
from typing import Optional

import httpx

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"
MAX_BATCH = 10
MAX_MESSAGE_LENGTH = 4000
MAX_ENTRY_BODY_LENGTH = 1000
SEPARATOR = "\n\n"

LEVEL_EMOJI = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🚨",
}


def _clip_escaped(text: str, limit: int = MAX_ENTRY_BODY_LENGTH) -> str:
    """Escape text for HTML and clip it without splitting an entity."""
    body = escape(text)
    if len(body) <= limit:
        return body

    body = body[:limit]
    amp = body.rfind("&")
    if amp > body.rfind(";"):
        body = body[:amp]
    return body + "…"


def format_entry(record: logging.LogRecord, message: str) -> str:
    level_emoji = LEVEL_EMOJI.get(record.levelname, "📝")
    return (
        f"{level_emoji} <b>{record.levelname}</b>\n"
        f"<code>{_clip_escaped(record.name, 200)}</code>\n"
        f"<pre>{_clip_escaped(message)}</pre>"
    )


class TelegramLogHandler(logging.Handler):
    """
    Sends log records to a Telegram chat in batches.

    Each entry is a complete HTML fragment. A message packs whole entries
    up to MAX_BATCH of them or MAX_MESSAGE_LENGTH characters, so markup is
    never cut in half. Only WARNING and above by default.
    """

    def __init__(self, bot_token: str, chat_id: str, level: int = logging.WARNING):
        super().__init__(level=level)
        self.bot_token = bot_token
        self.chat_id = chat_id
        self._queue: list[str] = []
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    def emit(self, record: logging.LogRecord):
        try:
            self._queue.append(format_entry(record, self.format(record)))

            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No event loop yet; the queue is flushed by the next batch
                return
            if self._task is None or self._task.done():
                self._task = loop.create_task(self._send_batch())

        except Exception:
            self.handleError(record)

    def pending(self) -> int:
        return len(self._queue)

    def _take_message(self) -> str:
        """Pop whole entries from the queue into one message."""
        taken: list[str] = []
        length = 0
        while self._queue and len(taken) < MAX_BATCH:
            entry = self._queue[0]
            extra = len(entry) + (len(SEPARATOR) if taken else 0)
            if taken and length + extra > MAX_MESSAGE_LENGTH:
                break
            taken.append(self._queue.pop(0))
            length += extra
        return SEPARATOR.join(taken)

    async def _post(self, client: httpx.AsyncClient, text: str):
        response = await client.post(
            TELEGRAM_API_URL.format(token=self.bot_token),
            json={
                "chat_id": self.chat_id,
                "text": text,
                "parse_mode": "HTML",
            },
        )
        response.raise_for_status()

    async def _send_batch(self, delay: float = 2.0):
        """Drain the queue, one request per packed message."""
        await asyncio.sleep(delay)

        async with self._lock:
            if not self._queue:
                return

            try:
                async with httpx.AsyncClient(timeout=10.0) as client:
                    while self._queue:
                        await self._post(client, self._take_message())
            except httpx.HTTPError:
                # Logging here would recurse into this handler; the failed
                # message is dropped and the rest waits for the next record
                return


def setup_telegram_logging(bot_token: str, chat_id: str) -> Optional[TelegramLogHandler]:
    """
    Attach a TelegramLogHandler to the root logger.
    Returns None when either setting is missing.
    """
    if not bot_token or not chat_id:
        return None

    handler = TelegramLogHandler(bot_token, chat_id, level=logging.WARNING)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.getLogger().addHandler(handler)
    return handler
