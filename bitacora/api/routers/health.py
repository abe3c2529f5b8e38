from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health", summary="Estado del servicio")
async def health() -> dict:
    return {"status": "ok"}
