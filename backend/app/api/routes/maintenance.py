"""Maintenance Routes — consistency report and repair across collections."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_reconciler
from app.services.reconciliation import ConsistencyReconciler

router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"])


@router.get("/consistency")
async def consistency_report(
    reconciler: ConsistencyReconciler = Depends(get_reconciler),
):
    report = await reconciler.check()
    return report.to_dict()


@router.post("/reconcile")
async def reconcile(
    reconciler: ConsistencyReconciler = Depends(get_reconciler),
):
    """Repair drift. The response describes what was found before repair."""
    report = await reconciler.repair()
    return report.to_dict()
