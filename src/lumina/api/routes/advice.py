from typing import Annotated, Any

from fastapi import APIRouter, Depends

from lumina.api.dependencies import dump, get_planner, get_workspace, http_error
from lumina.errors import LuminaError
from lumina.manager import FinanceWorkspace
from lumina.models import SavingsTarget
from lumina.services.advice import AdvicePlanner

router = APIRouter()


@router.post("/api/advice")
async def request_advice(
    target: SavingsTarget,
    planner: Annotated[AdvicePlanner, Depends(get_planner)],
) -> dict[str, Any]:
    try:
        advice = await planner.request(target)
    except LuminaError as exc:
        raise http_error(exc) from exc
    return dump(advice)


@router.get("/api/advice")
async def get_advice(
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
    planner: Annotated[AdvicePlanner, Depends(get_planner)],
) -> dict[str, Any]:
    return {
        "advice": dump(workspace.advice) if workspace.advice else None,
        "target": dump(workspace.savings_target) if workspace.savings_target else None,
        "busy": planner.busy,
    }
