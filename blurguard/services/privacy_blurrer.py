from pathlib import Path
from typing import Iterable, Optional

import structlog

from blurguard.core.config import settings
from blurguard.models.detection import Detection
from blurguard.services.backup_guardian import BackupGuardian
from blurguard.utils.coordinates import round_half_up, to_pixel_region
from blurguard.utils.image_utils import ImageBuffer
from blurguard.utils.path_locks import PathLocks

logger = structlog.get_logger()

MIN_BLUR_RADIUS = 1
MAX_BLUR_RADIUS = 100


def blur_radius(intensity: int) -> int:
    """Maps the configured intensity onto the 1-100 blur radius range."""
    return min(max(round_half_up(intensity / 2), MIN_BLUR_RADIUS), MAX_BLUR_RADIUS)


class PrivacyBlurrer:
    def __init__(
        self,
        backups: Optional[BackupGuardian] = None,
        locks: Optional[PathLocks] = None,
        intensity: Optional[int] = None,
    ):
        self.locks = locks or PathLocks()
        self.backups = backups or BackupGuardian(locks=self.locks)
        self.intensity = settings.BLUR_INTENSITY if intensity is None else intensity

    def redact(self, image_path, detections: Iterable[Detection]) -> int:
        """
        Blurs every detection that maps to a non-empty pixel region and
        overwrites the image in place. A backup is taken before anything is
        touched. Returns the number of regions blurred; nothing is written
        when that number is zero.
        """
        image_path = Path(image_path)
        detections = list(detections)
        radius = blur_radius(self.intensity)

        with self.locks.hold(image_path):
            backup_path, _ = self.backups.ensure_backup(image_path)

            image = ImageBuffer.decode(image_path)
            logger.info(
                "blurring_detections",
                path=str(image_path),
                count=len(detections),
                width=image.width,
                height=image.height,
            )

            regions_blurred = 0
            for i, detection in enumerate(detections):
                region = to_pixel_region(detection, image.width, image.height)
                if region is None:
                    logger.info("invalid_region_skipped", index=i, box_2d=list(detection.box_2d))
                    continue

                # Overlapping regions blur whatever is already in the buffer
                blurred = image.crop(region.x, region.y, region.width, region.height).blur(radius)
                image.composite(blurred, region.x, region.y)
                regions_blurred += 1
                logger.debug("region_blurred", index=i, **region.model_dump())

            if regions_blurred > 0:
                image.encode_and_write(image_path)

        logger.info("regions_redacted", path=str(image_path), count=regions_blurred, backup_path=str(backup_path))
        return regions_blurred
