from typing import Annotated, Any

from fastapi import APIRouter, Depends

from lumina.api.dependencies import dump, get_workspace
from lumina.api.schemas import FilterRequest, ManualEntryRequest, MarkSuspiciousRequest, MergeRequest
from lumina.domain.filters import DateSelection
from lumina.domain.transactions import categories_present
from lumina.logger import get_logger
from lumina.manager import FinanceWorkspace
from lumina.models import Category

logger = get_logger(__name__)

router = APIRouter()


def build_workspace_payload(workspace: FinanceWorkspace) -> dict[str, Any]:
    selection = workspace.date_selection
    return {
        "transactions": dump(workspace.filtered_transactions),
        "stats": dump(workspace.stats),
        "transactionCount": len(workspace.filtered_transactions),
        "totalStored": len(workspace.store),
        "filters": {
            "mode": selection.mode.value,
            "start": selection.start,
            "end": selection.end,
            "categories": [category.value for category in workspace.selected_categories],
        },
        "availableCategories": [category.value for category in categories_present(workspace.store)],
        "pendingAlerts": len(workspace.pending_alerts),
    }


@router.get("/api/transactions")
async def get_transactions(
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    workspace.refresh()
    return build_workspace_payload(workspace)


@router.post("/api/transactions")
async def merge_transactions(
    req: MergeRequest,
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    merged = workspace.merge(req.transactions)
    logger.info("[STORE] Merged %d transaction(s) via API.", len(merged))
    return build_workspace_payload(workspace)


@router.post("/api/transactions/manual")
async def add_manual_transaction(
    req: ManualEntryRequest,
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    tx = workspace.add_manual(req.date, req.amount, req.description, req.type)
    return {"transaction": dump(tx), **build_workspace_payload(workspace)}


@router.post("/api/transactions/suspicious")
async def mark_suspicious(
    req: MarkSuspiciousRequest,
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    changed = workspace.mark_suspicious(req.ids)
    return {"marked": [tx.id for tx in changed]}


@router.post("/api/reset")
async def reset_workspace(
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    workspace.reset()
    return build_workspace_payload(workspace)


@router.put("/api/filters")
async def set_filters(
    req: FilterRequest,
    workspace: Annotated[FinanceWorkspace, Depends(get_workspace)],
) -> dict[str, Any]:
    workspace.set_filters(
        DateSelection(mode=req.mode, start=req.start or None, end=req.end or None),
        req.categories,
    )
    return build_workspace_payload(workspace)


@router.get("/api/categories")
async def get_categories() -> list[str]:
    return [category.value for category in Category]
