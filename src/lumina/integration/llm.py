import base64
import json
import os
import re
from typing import Any

from openai import OpenAI
from pydantic import ValidationError

from lumina.errors import AdviceError, IngestionError
from lumina.logger import get_logger
from lumina.models import AdviceContext, AdviceResponse, Category

from .base import AdviceGenerator, StatementParser

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)

STATEMENT_PROMPT = """
Analyze this bank statement image or document and EXTRACT all transactions.

Classify each transaction as INCOME or EXPENSE:
1. A '+' sign usually indicates INCOME, a '-' sign usually indicates EXPENSE.
2. Amounts in 'Credit' or 'Deposit' columns are INCOME; 'Debit' or 'Withdrawal' columns are EXPENSE.
3. 'Salary', 'Dividend', 'Refund', 'Transfer In' are INCOME.
   'Purchase', 'Payment', 'Fee', 'Transfer Out' are EXPENSE.

Return a JSON object {{"transactions": [...]}}. Each transaction has:
- date (YYYY-MM-DD)
- description (string)
- amount (number, the ABSOLUTE POSITIVE value without sign)
- type ("INCOME" or "EXPENSE")
- category (one of: {categories})
"""

ADVICE_PROMPT = """
You are a financial advisor with a minimalist, calm and encouraging tone.
User data:
- Monthly income: {total_income}
- Monthly expense: {total_expense}
- Current savings (net): {current_savings}
- Target savings goal (monthly equivalent): {target}

Top expenses:
{top_expenses}

Give actionable advice on how to reach the goal and suggest specific cuts if necessary.
Return a JSON object:
{{"advice": "...", "suggestedCuts": [{{"category": "...", "suggestedReduction": 0, "reason": "..."}}]}}
"""


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _encode_document(content: bytes, mime_type: str, filename: str | None) -> dict[str, Any]:
    data_url = f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"
    if mime_type.startswith("image/"):
        return {"type": "input_image", "image_url": data_url}
    return {"type": "input_file", "filename": filename or "statement.pdf", "file_data": data_url}


class LLMClient(StatementParser, AdviceGenerator):
    def __init__(self, api_key: str | None = None, model: str = "gpt-4o-mini", base_url: str | None = None):
        self.client = OpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL") or None
        )
        self.model = model

    def parse_statement(
        self, content: bytes, mime_type: str, filename: str | None = None
    ) -> list[dict[str, Any]]:
        prompt = STATEMENT_PROMPT.format(
            categories=", ".join(f"'{category.value}'" for category in Category)
        )
        try:
            response = self.client.responses.create(
                model=self.model,
                instructions="You extract transactions from bank statements.",
                input=[{
                    "role": "user",
                    "content": [
                        _encode_document(content, mime_type, filename),
                        {"type": "input_text", "text": prompt},
                    ],
                }],
                text={"format": {"type": "json_object"}},
                temperature=0.0,
            )
        except Exception as e:
            logger.error(f"[INGEST] LLM error: {e}")
            raise IngestionError("Could not analyze file") from e

        payload = self._load_json(response, IngestionError)
        records = payload.get("transactions") if isinstance(payload, dict) else None
        if records is None:
            records = []
        if not isinstance(records, list):
            raise IngestionError("Statement response has no transaction list")
        logger.info("[INGEST] LLM extracted %d record(s).", len(records))
        return records

    def generate_advice(self, context: AdviceContext) -> AdviceResponse:
        top_expenses = "\n".join(
            f"- {total.category.value}: {total.amount}" for total in context.top_expenses
        ) or "- (none)"
        prompt = ADVICE_PROMPT.format(
            total_income=context.total_income,
            total_expense=context.total_expense,
            current_savings=context.current_savings,
            target=context.target_savings_monthly,
            top_expenses=top_expenses,
        )
        try:
            response = self.client.responses.create(
                model=self.model,
                instructions="You are a helpful financial assistant.",
                input=prompt,
                text={"format": {"type": "json_object"}},
            )
        except Exception as e:
            logger.error(f"[ADVICE] LLM error: {e}")
            raise AdviceError("Failed to get advice") from e

        payload = self._load_json(response, AdviceError)
        try:
            return AdviceResponse.model_validate(payload)
        except ValidationError as e:
            raise AdviceError("Failed to parse advice") from e

    def _load_json(self, response: object, error: type[Exception]) -> Any:
        text = self._extract_output_text(response)
        if not text:
            raise error("Empty response from LLM")
        try:
            return json.loads(strip_code_fences(text))
        except json.JSONDecodeError as e:
            logger.error("LLM returned non-JSON output: %.200s", text)
            raise error("Failed to parse LLM response") from e

    @staticmethod
    def _extract_output_text(response: object) -> str | None:
        output_text = getattr(response, "output_text", None)
        if isinstance(output_text, str) and output_text:
            return output_text

        output = getattr(response, "output", None)
        if not output:
            return None

        parts: list[str] = []
        for item in output:
            for block in getattr(item, "content", None) or []:
                if getattr(block, "type", None) in {"output_text", "text"}:
                    text = getattr(block, "text", None)
                    if text:
                        parts.append(text)
        return "".join(parts) or None
