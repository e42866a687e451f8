import asyncio
import contextlib
from time import perf_counter
from typing import Any

from lumina.core import settings
from lumina.domain.transactions import parse_raw_transactions
from lumina.errors import BusyError, CollaboratorUnavailableError, IngestionError
from lumina.integration.base import StatementParser
from lumina.logger import get_logger
from lumina.manager import FinanceWorkspace
from lumina.models import Transaction

logger = get_logger(__name__)


def advance_progress(current: float, ceiling: float = settings.PROGRESS_CEILING) -> float:
    """One tick of the upload indicator: fast at first, slowing towards the ceiling."""
    if current >= ceiling:
        return current
    return min(ceiling, current + max(1.0, (ceiling - current) / 10))


class StatementIngestion:
    def __init__(
        self,
        workspace: FinanceWorkspace,
        parser: StatementParser | None,
        tick_seconds: float = settings.PROGRESS_TICK_SECONDS,
    ) -> None:
        self.workspace = workspace
        self.parser = parser
        self.tick_seconds = tick_seconds
        self.busy = False
        self.progress = 0.0
        self.last_error: str | None = None

    def get_status(self) -> dict[str, Any]:
        return {
            "busy": self.busy,
            "progress": round(self.progress, 1),
            "error": self.last_error,
        }

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            self.progress = advance_progress(self.progress)

    async def ingest(
        self,
        content: bytes,
        mime_type: str,
        filename: str | None = None,
    ) -> list[Transaction]:
        if self.parser is None:
            raise CollaboratorUnavailableError("Statement parsing is not configured")
        if self.busy:
            raise BusyError("A statement is already being analyzed")

        self.busy = True
        self.progress = 0.0
        self.last_error = None
        ticker = asyncio.create_task(self._tick())
        started = perf_counter()
        try:
            records = await asyncio.to_thread(
                self.parser.parse_statement, content, mime_type, filename
            )
            transactions = parse_raw_transactions(records)
        except IngestionError as exc:
            self._fail(str(exc))
            raise
        except Exception as exc:
            self._fail("Could not analyze file")
            raise IngestionError("Could not analyze file") from exc
        finally:
            ticker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ticker
            self.busy = False

        self.progress = 100.0
        merged = self.workspace.ingest(transactions)
        logger.info(
            "[INGEST] '%s' analyzed in %.2f s: %d transaction(s).",
            filename or "statement",
            perf_counter() - started,
            len(merged),
        )
        return merged

    def _fail(self, message: str) -> None:
        self.progress = 0.0
        self.last_error = message
        logger.error("[INGEST] Statement analysis failed: %s", message)
