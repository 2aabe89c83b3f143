from fastapi import APIRouter, Depends

from crossbridge.api.auth import require_admin
from crossbridge.api.routes import get_request_store
import crossbridge.observability.metrics as metrics

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/operator")
def get_operator(store=Depends(get_request_store), _=Depends(require_admin)):
    """Fixed operator identity, or null before /init."""
    operator_id = store.get_operator()
    return {"initialized": operator_id is not None, "operator": operator_id}


@router.get("/metrics")
def get_metrics(_=Depends(require_admin)):
    return metrics.get_metrics_snapshot()
