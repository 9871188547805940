"""Pydantic models for health endpoints."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Response model for service health checks."""

    status: str = "healthy"
    system_operational: bool = True


class ConnectionTestResponse(BaseModel):
    message: str
    data: List[Dict[str, Any]]
    error: Optional[str] = None
