from abc import ABC, abstractmethod
from typing import Any

from lumina.models import AdviceContext, AdviceResponse


class StatementParser(ABC):
    @abstractmethod
    def parse_statement(
        self, content: bytes, mime_type: str, filename: str | None = None
    ) -> list[dict[str, Any]]:
        """Extract raw transaction records from a statement document."""
        pass


class AdviceGenerator(ABC):
    @abstractmethod
    def generate_advice(self, context: AdviceContext) -> AdviceResponse:
        """Produce savings advice for the given context."""
        pass
