"""API v1 router aggregator."""

from fastapi import APIRouter

from topic_suggest.api.v1.suggest.routes import router as suggest_router

api_router = APIRouter()

api_router.include_router(suggest_router, prefix="/suggest", tags=["Suggest"])
