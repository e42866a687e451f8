from typing import Annotated, Any

from fastapi import APIRouter, Depends

from lumina.api.dependencies import dump, get_workspace
from lumina.manager import FinanceWorkspace

router = APIRouter()


@router.get("/api/alerts")
async def get_alerts(
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    return {"batches": [dump(batch) for batch in workspace.pending_alerts]}


@router.post("/api/alerts/ack")
async def acknowledge_alert(
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    batch = workspace.acknowledge_alert()
    return {"acknowledged": dump(batch), "remaining": len(workspace.pending_alerts)}
