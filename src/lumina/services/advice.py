import asyncio

from lumina.errors import AdviceError, BusyError, CollaboratorUnavailableError
from lumina.integration.base import AdviceGenerator
from lumina.logger import get_logger
from lumina.manager import FinanceWorkspace
from lumina.models import AdviceResponse, SavingsTarget

logger = get_logger(__name__)


class AdvicePlanner:
    """Requests savings advice; a failed request leaves the previous advice in place."""

    def __init__(self, workspace: FinanceWorkspace, generator: AdviceGenerator | None) -> None:
        self.workspace = workspace
        self.generator = generator
        self.busy = False

    async def request(self, target: SavingsTarget) -> AdviceResponse:
        if self.generator is None:
            raise CollaboratorUnavailableError("Advice generation is not configured")
        if self.busy:
            raise BusyError("Advice is already being generated")

        self.busy = True
        context = self.workspace.advice_context(target)
        logger.info(
            "[ADVICE] Requesting advice: target %.2f/month, savings %.2f, %d top categories.",
            context.target_savings_monthly,
            context.current_savings,
            len(context.top_expenses),
        )
        try:
            advice = await asyncio.to_thread(self.generator.generate_advice, context)
        except AdviceError as exc:
            logger.warning("[ADVICE] %s", exc)
            raise
        except Exception as exc:
            logger.warning("[ADVICE] Advice generation failed: %s", exc)
            raise AdviceError("Failed to get advice") from exc
        finally:
            self.busy = False

        self.workspace.set_advice(advice, target)
        return advice
