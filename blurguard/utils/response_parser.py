import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Union

import structlog

from blurguard.core.exceptions import MalformedResponse

logger = structlog.get_logger()

FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


@dataclass(frozen=True)
class ParsedRecords:
    records: List[Any]
    strategy: str


@dataclass(frozen=True)
class EmptyResponse:
    reason: str
    records: List[Any] = field(default_factory=list)


ParsedResponse = Union[ParsedRecords, EmptyResponse]


def _load(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except (ValueError, TypeError, RecursionError) as e:
        raise MalformedResponse(str(e)) from e


def _fenced(text: str) -> Any:
    match = FENCED_BLOCK_RE.search(text)
    if not match:
        raise MalformedResponse("no fenced code block")
    return _load(match.group(1).strip())


def _bracketed(text: str) -> Any:
    # first "[" through last "]"
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end < start:
        raise MalformedResponse("no bracketed array")
    return _load(text[start:end + 1])


STRATEGIES = (
    ("direct", _load),
    ("fenced", _fenced),
    ("bracketed", _bracketed),
)


def parse_response(text: Any) -> ParsedResponse:
    """
    Recovers the JSON array of detection records from an AI payload.
    Tries the whole text, then a ``` fenced block, then the first [...] span.
    The first strategy that parses wins; a parsed value that is not an array
    counts as an empty response. Never raises.
    """
    if not isinstance(text, str) or not text.strip():
        return EmptyResponse(reason="empty payload")

    for name, strategy in STRATEGIES:
        try:
            parsed = strategy(text)
        except MalformedResponse:
            continue

        if not isinstance(parsed, list):
            logger.info("response_not_an_array", strategy=name, parsed_type=type(parsed).__name__)
            return EmptyResponse(reason=f"{name} parse returned {type(parsed).__name__}")
        return ParsedRecords(records=parsed, strategy=name)

    logger.warning("response_unparseable", length=len(text))
    return EmptyResponse(reason="no strategy could parse the payload")


def extract_records(text: Any) -> List[Any]:
    return parse_response(text).records
