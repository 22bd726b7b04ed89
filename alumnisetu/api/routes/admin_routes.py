"""
Admin Routes

GET /admin/pending-approvals - Jobs and events waiting for review
POST /admin/pending-approvals - Approve or reject one pending item
"""

from fastapi import APIRouter, HTTPException, Depends

from alumnisetu.core.auth import get_current_admin
from alumnisetu.services.approval_service import get_approval_service, ItemNotFound, AlreadyReviewed
from alumnisetu.schemas.schemas import ApprovalDecision

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/pending-approvals")
async def pending_approvals(admin: dict = Depends(get_current_admin)):
    """Everything still in the pending state."""
    jobs = get_approval_service("job").list_pending()
    events = get_approval_service("event").list_pending()
    return {
        "success": True,
        "data": {"jobs": jobs, "events": events, "total": len(jobs) + len(events)}
    }


@router.post("/pending-approvals")
async def decide_pending(decision: ApprovalDecision, admin: dict = Depends(get_current_admin)):
    """Approve (publish) or reject a pending job/event and notify its submitter."""
    service = get_approval_service(decision.type.value)
    try:
        service.decide(decision.itemId, decision.action.value, admin, decision.reason)
    except ItemNotFound:
        raise HTTPException(status_code=404, detail="Pending item not found")
    except AlreadyReviewed as e:
        raise HTTPException(status_code=400, detail=f"Item already {e}")

    return {
        "success": True,
        "message": f"{decision.type.value} {decision.action.value}d successfully"
    }
