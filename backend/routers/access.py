"""Access router: shared access code check for receipt scanning."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

import schemas
from dependencies import check_access_code
from utils.rate_limiter import access_rate_limiter


router = APIRouter(tags=["access"])


@router.post("/verify-access", dependencies=[Depends(access_rate_limiter)])
def verify_access(payload: schemas.AccessCheck):
    """
    Check a submitted access code.

    The client keeps the verified code for the rest of its session and sends
    it as X-Access-Code when scanning.
    """
    if check_access_code(payload.code):
        return {"valid": True}
    return JSONResponse(status_code=401, content={"valid": False})
