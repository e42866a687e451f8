import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from lumina.api.routes import advice, alerts, statements, transactions
from lumina.core import settings
from lumina.integration.llm import LLMClient
from lumina.logger import get_logger, setup_logging
from lumina.manager import FinanceWorkspace
from lumina.services.advice import AdvicePlanner
from lumina.services.ingestion import StatementIngestion

logger = get_logger(__name__)


def build_llm_client() -> LLMClient | None:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        logger.warning("OPENAI_API_KEY not set. Statement parsing and advice are disabled.")
        return None
    model = settings.get_openai_model()
    base_url = os.getenv("OPENAI_BASE_URL")
    logger.info(f"LLM client enabled: model={model}, base_url={base_url or 'default'}")
    return LLMClient(api_key=api_key, model=model, base_url=base_url)


def init_state(app: FastAPI, llm: LLMClient | None) -> None:
    workspace = FinanceWorkspace()
    app.state.workspace = workspace
    app.state.ingestion = StatementIngestion(workspace=workspace, parser=llm)
    app.state.planner = AdvicePlanner(workspace=workspace, generator=llm)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()
        init_state(app, build_llm_client())
        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Lumina", lifespan=lifespan)

    app.include_router(transactions.router)
    app.include_router(statements.router)
    app.include_router(alerts.router)
    app.include_router(advice.router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
