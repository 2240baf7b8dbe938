"""
FastAPI dependencies shared by the API and webhook routers.
"""

from fastapi import HTTPException, Request, status

from frontdesk.runtime import Runtime


def get_runtime(request: Request) -> Runtime:
    """Return the Runtime owned by the application."""
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up",
        )
    return runtime
