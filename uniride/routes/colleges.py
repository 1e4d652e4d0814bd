from fastapi import APIRouter

from uniride.config import COLLEGES

router = APIRouter(tags=["Colleges"])


@router.get("/api/colleges")
async def list_colleges():
    return {"colleges": COLLEGES}
