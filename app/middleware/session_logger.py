from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.session_log import SessionLog
from typing import Optional
import logging

logger = logging.getLogger(__name__)


async def log_session_action(
    db: AsyncSession,
    user_id: str,
    action: str,
    request: Optional[Request] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    status: str = "success",
    status_code: int = 200,
    error_message: Optional[str] = None
):
    """Write one audit row for a user action; audit failures never fail the request"""
    session_log = SessionLog(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        ip_address=request.client.host if request is not None and request.client else None,
        user_agent=request.headers.get("user-agent") if request is not None else None,
        status=status,
        status_code=status_code,
        error_message=error_message
    )
    try:
        db.add(session_log)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Failed to write session log for {action}: {e}")


class SessionActionLogger:
    """Context manager recording the outcome of a user action"""

    def __init__(
        self,
        db: AsyncSession,
        user_id: str,
        action: str,
        request: Optional[Request] = None,
        resource_type: Optional[str] = None
    ):
        self.db = db
        self.user_id = user_id
        self.action = action
        self.request = request
        self.resource_type = resource_type
        self.resource_id = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            status, status_code, error_message = "success", 200, None
        else:
            status = "failure"
            status_code = getattr(exc_val, "status_code", 500)
            error_message = str(getattr(exc_val, "detail", exc_val))
            # Drop whatever the failed action left pending before auditing
            await self.db.rollback()

        await log_session_action(
            self.db,
            self.user_id,
            self.action,
            request=self.request,
            resource_type=self.resource_type,
            resource_id=self.resource_id,
            status=status,
            status_code=status_code,
            error_message=error_message
        )
        return False

    def set_resource(self, resource_id: str):
        self.resource_id = resource_id
