from functools import lru_cache
from fastapi import APIRouter, HTTPException, Depends
from blurguard.api.schemas import (
    AutoBlurRequest,
    AutoBlurResponse,
    DetectRequest,
    DetectResponse,
    RedactRequest,
    RedactResponse,
    RestoreRequest,
    RestoreResponse,
)
from blurguard.core.exceptions import (
    ImageIOError,
    InvalidBackupReference,
    UnsupportedImageType,
    VisionServiceError,
)
from blurguard.services.job_processor import JobProcessor
from blurguard.utils.detection_validator import validate_detections
import structlog

router = APIRouter()
logger = structlog.get_logger()

# Dependency Injection (Cached)
@lru_cache()
def get_processor() -> JobProcessor:
    return JobProcessor()


def _raise_http(e: Exception, event: str):
    if isinstance(e, InvalidBackupReference):
        status_code = 400
    elif isinstance(e, UnsupportedImageType):
        status_code = 415
    elif isinstance(e, VisionServiceError):
        status_code = 502
    else:
        status_code = 500
    logger.error(event, error=str(e), status_code=status_code)
    raise HTTPException(status_code=status_code, detail=str(e))


@router.post("/detect", response_model=DetectResponse)
def detect_sensitive_data(
    request: DetectRequest,
    processor: JobProcessor = Depends(get_processor)
):
    try:
        detections = processor.detect_and_offer_redaction(request.image_path, request.prompt)
        preview = processor.preview(request.image_path, detections)
    except (ImageIOError, UnsupportedImageType, VisionServiceError) as e:
        _raise_http(e, "detect_failed")

    return {
        "image_path": request.image_path,
        "width": preview["width"],
        "height": preview["height"],
        "message": f"Found {len(detections)} sensitive region(s)" if detections else "No sensitive data found",
        "detections": [
            {**d.model_dump(), "label": d.display_label} for d in detections
        ],
        "preview_boxes": preview["boxes"],
    }


@router.post("/redact", response_model=RedactResponse)
def redact_regions(
    request: RedactRequest,
    processor: JobProcessor = Depends(get_processor)
):
    records = request.detections
    if request.indices is not None:
        records = [records[i] for i in request.indices if 0 <= i < len(records)]

    detections = validate_detections(records)
    try:
        regions_redacted = processor.redact(request.image_path, detections)
    except (ImageIOError, UnsupportedImageType) as e:
        _raise_http(e, "redact_failed")

    backup_path = processor.backups.backup_path_for(request.image_path)
    return {
        "image_path": request.image_path,
        "regions_redacted": regions_redacted,
        "backup_path": str(backup_path) if backup_path.exists() else None,
    }


@router.post("/auto-blur", response_model=AutoBlurResponse)
def auto_blur(
    request: AutoBlurRequest,
    processor: JobProcessor = Depends(get_processor)
):
    try:
        return processor.auto_blur(request.image_path)
    except (ImageIOError, UnsupportedImageType, VisionServiceError) as e:
        _raise_http(e, "auto_blur_failed")


@router.post("/restore", response_model=RestoreResponse)
def restore_backup(
    request: RestoreRequest,
    processor: JobProcessor = Depends(get_processor)
):
    try:
        restored_path = processor.restore_from_backup(request.backup_path)
    except (ImageIOError, InvalidBackupReference) as e:
        _raise_http(e, "restore_failed")

    return {"restored_path": str(restored_path)}
