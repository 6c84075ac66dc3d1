import uuid
from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from blurguard.core.config import settings
from blurguard.core.exceptions import ImageDecodeError, UnsupportedImageType
from blurguard.core.prompts import DEFAULT_SENSITIVE_PROMPT, build_auto_blur_prompt
from blurguard.models.detection import Detection
from blurguard.models.vision_client import VisionClient
from blurguard.ports.vision_port import VisionPort
from blurguard.services.backup_guardian import BackupGuardian
from blurguard.services.privacy_blurrer import PrivacyBlurrer
from blurguard.utils.coordinates import to_preview_box
from blurguard.utils.detection_validator import validate_detections
from blurguard.utils.image_utils import ImageBuffer
from blurguard.utils.path_locks import PathLocks
from blurguard.utils.response_parser import parse_response

logger = structlog.get_logger()

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}


def is_image_file(path) -> bool:
    return Path(path).suffix.lower() in MIME_TYPES


def mime_type_for(path) -> str:
    ext = Path(path).suffix.lower()
    if ext not in MIME_TYPES:
        raise UnsupportedImageType(f"Unsupported image type: {ext or Path(path).name}")
    return MIME_TYPES[ext]


class JobProcessor:
    """
    Detect -> validate -> redact workflow. Collaborators are passed in so a
    caller controls which AI client and which lock registry are used.
    """

    def __init__(
        self,
        vision_client: Optional[VisionPort] = None,
        backups: Optional[BackupGuardian] = None,
        blurrer: Optional[PrivacyBlurrer] = None,
        locks: Optional[PathLocks] = None,
    ):
        if locks is None:
            locks = backups.locks if backups is not None else PathLocks()
        self.locks = locks
        self.vision_client = vision_client or VisionClient()
        self.backups = backups or BackupGuardian(locks=self.locks)
        self.blurrer = blurrer or PrivacyBlurrer(backups=self.backups, locks=self.locks)

    def _scan(self, image_path: Path, prompt: str) -> List[Detection]:
        mime_type = mime_type_for(image_path)
        try:
            image_bytes = image_path.read_bytes()
        except OSError as e:
            raise ImageDecodeError(f"Failed to read image from {image_path}: {e}") from e

        result_text = self.vision_client.generate_text(image_bytes, mime_type, prompt)
        parsed = parse_response(result_text)
        detections = validate_detections(parsed.records)
        logger.info(
            "detections_parsed",
            path=str(image_path),
            records=len(parsed.records),
            valid=len(detections),
        )
        return detections

    def detect_and_offer_redaction(self, image_path, detection_prompt_text: Optional[str] = None) -> List[Detection]:
        """
        Asks the AI model for sensitive regions. An empty list means nothing
        sensitive was found; it is not an error.
        """
        image_path = Path(image_path)
        prompt = detection_prompt_text or settings.DETECTION_PROMPT or DEFAULT_SENSITIVE_PROMPT
        return self._scan(image_path, prompt)

    def preview(self, image_path, detections: Iterable[Detection]) -> dict:
        image = ImageBuffer.decode(image_path)
        return {
            "width": image.width,
            "height": image.height,
            "boxes": [to_preview_box(d, i) for i, d in enumerate(detections)],
        }

    def redact(self, image_path, detections: Iterable[Detection]) -> int:
        mime_type_for(image_path)
        return self.blurrer.redact(image_path, detections)

    def auto_blur(self, image_path) -> dict:
        """Detects with the configured type hints and blurs everything found."""
        job_id = str(uuid.uuid4())
        image_path = Path(image_path)
        logger.info("starting_auto_blur", job_id=job_id, path=str(image_path))

        prompt = build_auto_blur_prompt(settings.SENSITIVE_DATA_TYPES)
        detections = self._scan(image_path, prompt)

        regions_redacted = 0
        backup_path = None
        if detections:
            regions_redacted = self.redact(image_path, detections)
            backup_path = str(self.backups.backup_path_for(image_path))
        else:
            logger.info("no_sensitive_data_found", job_id=job_id)

        return {
            "job_id": job_id,
            "status": "success",
            "detections_found": len(detections),
            "regions_redacted": regions_redacted,
            "backup_path": backup_path,
        }

    def restore_from_backup(self, backup_path) -> Path:
        return self.backups.restore(backup_path)
