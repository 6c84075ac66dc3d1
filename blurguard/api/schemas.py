from pydantic import BaseModel
from typing import Any, List, Optional, Union

class DetectRequest(BaseModel):
    image_path: str
    prompt: Optional[str] = None

class DetectionOut(BaseModel):
    kind: str
    box_2d: List[Union[int, float]]
    label: str
    value: Optional[str] = None
    confidence: Optional[str] = None
    risk_level: Optional[str] = None
    description: Optional[str] = None

class PreviewBox(BaseModel):
    left: str
    top: str
    width: str
    height: str
    label: str
    num: int
    index: int

class DetectResponse(BaseModel):
    image_path: str
    width: int
    height: int
    message: str
    detections: List[DetectionOut]
    preview_boxes: List[PreviewBox]

class RedactRequest(BaseModel):
    image_path: str
    detections: List[Any]
    indices: Optional[List[int]] = None

class RedactResponse(BaseModel):
    image_path: str
    regions_redacted: int
    backup_path: Optional[str] = None

class AutoBlurRequest(BaseModel):
    image_path: str

class AutoBlurResponse(BaseModel):
    job_id: str
    status: str
    detections_found: int
    regions_redacted: int
    backup_path: Optional[str] = None

class RestoreRequest(BaseModel):
    backup_path: str

class RestoreResponse(BaseModel):
    restored_path: str
