import math
from numbers import Real
from typing import Any, Iterable, List

import structlog

from blurguard.core.exceptions import InvalidDetection
from blurguard.models.detection import Detection

logger = structlog.get_logger()


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def check_record(record: Any) -> None:
    """Raises InvalidDetection unless record is a dict with a 4-number box_2d."""
    if not isinstance(record, dict):
        raise InvalidDetection(f"record is {type(record).__name__}, not an object")

    box = record.get("box_2d")
    if not isinstance(box, (list, tuple)):
        raise InvalidDetection("box_2d missing or not an array")
    if len(box) != 4:
        raise InvalidDetection(f"box_2d has {len(box)} entries")
    if not all(_is_number(n) for n in box):
        raise InvalidDetection("box_2d entries must be numbers")


def is_valid_detection(record: Any) -> bool:
    try:
        check_record(record)
    except InvalidDetection:
        return False
    return True


def validate_detections(records: Iterable[Any]) -> List[Detection]:
    """
    Keeps the structurally valid records and converts them to Detections.
    Range and ordering of box_2d are not checked here.
    """
    detections = []
    for i, record in enumerate(records):
        try:
            check_record(record)
        except InvalidDetection as e:
            logger.debug("detection_dropped", index=i, reason=str(e))
            continue
        detections.append(Detection.from_record(record))
    return detections
