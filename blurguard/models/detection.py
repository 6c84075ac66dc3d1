from pydantic import BaseModel
from typing import Any, Dict, Optional, Tuple, Union

Number = Union[int, float]

class Detection(BaseModel):
    """
    A region of interest proposed by the AI model.
    box_2d: [ymin, xmin, ymax, xmax] normalized to 0-1000. Ordering and range
    are not guaranteed; the coordinate mapper clamps and rejects.
    """
    kind: str = "Object"
    box_2d: Tuple[Number, Number, Number, Number]
    value: Optional[str] = None
    confidence: Optional[str] = None
    risk_level: Optional[str] = None
    description: Optional[str] = None

    @property
    def display_label(self) -> str:
        if self.value:
            return f"{self.kind}: {self.value}"
        return self.kind

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Detection":
        """Builds a Detection from a structurally valid raw record."""
        kind = record.get("type") or record.get("kind") or record.get("label") or "Object"
        return cls(
            kind=str(kind),
            box_2d=tuple(record["box_2d"]),
            value=_optional_str(record.get("value")),
            confidence=_optional_str(record.get("confidence")),
            risk_level=_optional_str(record.get("risk_level")),
            description=_optional_str(record.get("description")),
        )


class PixelRegion(BaseModel):
    x: int
    y: int
    width: int
    height: int


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)
