from fastapi import APIRouter

from account_service.schemas.responses import SuccessOut

router = APIRouter(tags=["Health"])


@router.get("/healthz", response_model=SuccessOut)
async def healthz() -> SuccessOut:
    return SuccessOut(message="API is working!")
