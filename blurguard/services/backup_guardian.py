import shutil
from pathlib import Path
from typing import Optional, Tuple

import structlog

from blurguard.core.config import settings
from blurguard.core.exceptions import ImageIOError, InvalidBackupReference
from blurguard.utils.path_locks import PathLocks

logger = structlog.get_logger()

class BackupGuardian:
    """
    Keeps exactly one pristine copy of an image beside it once the image has
    been redacted: photo.png -> photo_backup.png.
    """

    def __init__(self, suffix: Optional[str] = None, locks: Optional[PathLocks] = None):
        self.suffix = suffix or settings.BACKUP_SUFFIX
        self.locks = locks or PathLocks()

    def backup_path_for(self, path) -> Path:
        path = Path(path)
        return path.with_name(f"{path.stem}{self.suffix}{path.suffix}")

    def is_backup_path(self, path) -> bool:
        stem = Path(path).stem
        return stem.endswith(self.suffix) and len(stem) > len(self.suffix)

    def original_path_for(self, backup_path) -> Path:
        """
        Strips the trailing suffix only, so photo_backup_backup.png maps back
        to photo_backup.png.
        """
        backup_path = Path(backup_path)
        if not self.is_backup_path(backup_path):
            raise InvalidBackupReference(
                f"{backup_path.name} is not a backup file. "
                f"Backup files end with \"{self.suffix}\" before the extension."
            )
        original_stem = backup_path.stem[:-len(self.suffix)]
        return backup_path.with_name(f"{original_stem}{backup_path.suffix}")

    def ensure_backup(self, path) -> Tuple[Path, bool]:
        """
        Copies path to its backup location unless a backup already exists.
        An existing backup is never refreshed: it holds the pre-redaction bytes.
        Returns (backup_path, created).
        """
        path = Path(path)
        backup_path = self.backup_path_for(path)
        if backup_path.exists():
            return backup_path, False

        try:
            shutil.copyfile(path, backup_path)
        except OSError as e:
            logger.error("backup_failed", error=str(e), path=str(path))
            raise ImageIOError(f"Failed to back up {path}: {e}") from e

        logger.info("backup_created", path=str(path), backup_path=str(backup_path))
        return backup_path, True

    def restore(self, backup_path) -> Path:
        """Copies the backup over its original, then deletes the backup."""
        backup_path = Path(backup_path)
        original_path = self.original_path_for(backup_path)

        if not backup_path.is_file():
            raise ImageIOError(f"Backup file not found: {backup_path}")

        with self.locks.hold(original_path):
            try:
                shutil.copyfile(backup_path, original_path)
                backup_path.unlink()
            except OSError as e:
                logger.error("restore_failed", error=str(e), backup_path=str(backup_path))
                raise ImageIOError(f"Failed to restore {original_path.name}: {e}") from e

        logger.info("backup_restored", path=str(original_path), backup_path=str(backup_path))
        return original_path
