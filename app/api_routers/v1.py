from fastapi import APIRouter

from app.features.evaluation.routes.evaluation import router as evaluation_router

api_router = APIRouter()

api_router.include_router(evaluation_router)
