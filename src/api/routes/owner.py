from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.adapters.auth.local_auth import LocalAuthService
from src.api.deps import get_auth_service
from src.components.bootstrap import run_check_owner_status

router = APIRouter()


@router.get("/status")
def owner_status(auth: LocalAuthService = Depends(get_auth_service)) -> Any:
    """Whether the owner account can still be created. Fails closed."""
    status = run_check_owner_status(auth)
    if status.error is not None:
        return JSONResponse(
            status_code=500,
            content={"error": status.error, "canSignup": False, "userCount": 0},
        )
    return status.to_dict()
