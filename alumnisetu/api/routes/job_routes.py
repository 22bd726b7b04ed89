"""
Job Routes

GET /jobs - List approved job postings
POST /jobs - Submit job (admins publish directly, others go to approval)
DELETE /jobs/{job_id} - Delete job (admin or creator)
"""

from fastapi import APIRouter, HTTPException, Depends

from alumnisetu.db.mongodb import COLLECTIONS
from alumnisetu.core.auth import get_current_user
from alumnisetu.services.store import get_all_items, get_item, delete_item, serialize_docs
from alumnisetu.services.approval_service import get_approval_service
from alumnisetu.schemas.schemas import JobCreate
from alumnisetu.api.routes.event_routes import is_listable

router = APIRouter(prefix="/jobs", tags=["Jobs"])

JOBS = COLLECTIONS["jobs"]


@router.get("")
async def list_jobs():
    """List approved job postings, newest first."""
    jobs = get_all_items(JOBS, sort=[("createdAt", -1)])
    return serialize_docs(j for j in jobs if is_listable(j))


@router.post("", status_code=201)
async def create_job(job: JobCreate, user: dict = Depends(get_current_user)):
    """
    Submit a job posting.

    Admin submissions are published immediately. Everyone else's go to
    pending_jobs and every admin gets a notification.
    """
    return get_approval_service("job").submit(job.model_dump(), user)


@router.delete("/{job_id}")
async def delete_job(job_id: str, user: dict = Depends(get_current_user)):
    """Delete a job posting. Admins may delete any job, users only their own."""
    job = get_item(JOBS, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if user["role"] != "admin" and job.get("createdBy") != user["id"]:
        raise HTTPException(status_code=403, detail="Permission denied")

    delete_item(JOBS, job_id)
    return {"success": True, "message": "Job deleted"}
