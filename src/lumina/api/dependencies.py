from typing import Any

from fastapi import HTTPException, Request

from lumina.errors import (
    AdviceError,
    BusyError,
    CollaboratorUnavailableError,
    IngestionError,
    LuminaError,
)
from lumina.manager import FinanceWorkspace
from lumina.services.advice import AdvicePlanner
from lumina.services.ingestion import StatementIngestion

_STATUS_CODES: dict[type[LuminaError], int] = {
    BusyError: 409,
    CollaboratorUnavailableError: 503,
    IngestionError: 502,
    AdviceError: 502,
}


def get_workspace(request: Request) -> FinanceWorkspace:
    workspace = getattr(request.app.state, "workspace", None)
    if not workspace:
        raise HTTPException(status_code=500, detail="Workspace not initialized")
    return workspace


def get_ingestion(request: Request) -> StatementIngestion:
    ingestion = getattr(request.app.state, "ingestion", None)
    if not ingestion:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return ingestion


def get_planner(request: Request) -> AdvicePlanner:
    planner = getattr(request.app.state, "planner", None)
    if not planner:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return planner


def http_error(exc: LuminaError) -> HTTPException:
    status_code = _STATUS_CODES.get(type(exc), 500)
    return HTTPException(status_code=status_code, detail=str(exc) or exc.__class__.__name__)


def dump(model: Any) -> Any:
    if isinstance(model, list):
        return [dump(item) for item in model]
    return model.model_dump(mode="json", by_alias=True)
