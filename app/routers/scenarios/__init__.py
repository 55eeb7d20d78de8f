from fastapi import APIRouter
from app.routers.scenarios import generate

router = APIRouter()

# POST /generate
router.include_router(generate.router)
