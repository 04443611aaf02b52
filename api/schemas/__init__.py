"""
Pydantic schemas for API request/response validation.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from enum import Enum
from datetime import datetime, timezone

from app.engines import RecognitionMode


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProcessingStatus(str, Enum):
    COMPLETED = "completed"
    NO_CONTENT = "no_content"
    FAILED = "failed"


class ProcessingOptions(BaseModel):
    mode: RecognitionMode = Field(default=RecognitionMode.OCR)
    language: Optional[str] = Field(default=None, description="Language hint, e.g. 'en'")


class RegionSummary(BaseModel):
    id: str
    type: str
    points: List[List[int]]
    custom: Optional[str] = None
    text: Optional[str] = None
    line_count: int = 0


class ProcessingResult(BaseModel):
    request_id: str
    status: ProcessingStatus
    error_code: int = 0
    processing_time_ms: float
    image_width: int = 0
    image_height: int = 0
    regions_detected: int = 0
    regions: List[RegionSummary] = []
    output_files: Dict[str, str] = Field(default_factory=dict)
    download_urls: Dict[str, str] = Field(default_factory=dict)
    errors: List[str] = []


# Operational Schemas
class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: datetime


class ReadinessResponse(BaseModel):
    status: str
    client_ready: bool
    credentials_configured: bool
    details: Dict[str, Any] = {}


class InfoResponse(BaseModel):
    app_name: str
    version: str
    git_commit: str
    build_date: str
    output_format: str
    python_version: str


class MetricsResponse(BaseModel):
    requests_total: int
    requests_success: int
    requests_failed: int
    avg_processing_time_ms: float
    uptime_seconds: float


class ErrorResponse(BaseModel):
    error: str
    detail: str
    request_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utc_now)
