# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Lets a client that just signed up poll its account setup task.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from app.auth import AuthUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

STATUS_MESSAGES = {
    "PENDING": "Waiting in queue...",
    "STARTED": "Setting up your family...",
    "RETRY": "Retrying account setup...",
    "SUCCESS": "Complete",
    "FAILURE": "Account setup failed",
}


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    message: str | None = None
    result: dict | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the status of a background task.

    Returns the current state of the task:
    - PENDING: Task is waiting in queue (or unknown)
    - STARTED: Task has been picked up by a worker
    - RETRY: A database error occurred and the task will run again
    - SUCCESS: Task completed successfully (404 if it set up another account)
    - FAILURE: Task gave up; the raw error is kept in the worker logs
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)
        task_status = result.status

    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=500, detail="Failed to get task status")

    response = TaskStatusResponse(
        task_id=task_id,
        status=task_status,
        message=STATUS_MESSAGES.get(task_status),
    )

    if task_status == "SUCCESS" and isinstance(result.result, dict):
        if result.result.get("account_id") != str(user.id):
            # Don't reveal that another account's task exists
            raise HTTPException(status_code=404, detail="Task not found")
        response.result = result.result

    return response
