import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from gachaapi.database.session import get_db
from gachaapi.repositories.user_repository import UserRepository
from gachaapi.schemas.health import ConnectionTestResponse, HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def hello() -> str:
    return "Hello from Backend!"


@router.get("/health", response_model=HealthCheckResponse)
def health_check() -> HealthCheckResponse:
    """Health check endpoint."""

    return HealthCheckResponse()


@router.get("/test-supabase", response_model=ConnectionTestResponse)
def test_supabase(db: Session = Depends(get_db)):
    """DB 연결 확인 - 사용자 한 행 조회"""
    try:
        users = UserRepository(db).sample(limit=1)
    except Exception as e:
        logger.error(f"Supabase connection test failed: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={
                "message": "Error fetching data from Supabase",
                "error": type(e).__name__,
            },
        )

    return ConnectionTestResponse(
        message="Successfully connected to Supabase!",
        data=[user.model_dump(mode="json") for user in users],
    )
