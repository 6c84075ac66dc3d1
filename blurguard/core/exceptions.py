class RedactionError(Exception):
    """Base class for every failure raised by the redaction pipeline."""


class MalformedResponse(RedactionError):
    """The AI payload could not be parsed. Absorbed by the parser."""


class InvalidDetection(RedactionError):
    """A single record failed structural validation. Absorbed by the validator."""


class ImageIOError(RedactionError):
    """Reading, decoding, encoding or writing an image (or its backup) failed."""


class ImageDecodeError(ImageIOError):
    pass


class ImageEncodeError(ImageIOError):
    pass


class InvalidBackupReference(RedactionError):
    """A restore was requested on a path that is not a backup file."""


class UnsupportedImageType(RedactionError):
    pass


class VisionServiceError(RedactionError):
    """The remote AI model call failed."""
