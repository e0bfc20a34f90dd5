"""
Parsing of the partner-matching model output.

The model is asked for a bare JSON array but may wrap it in markdown code
fences. Parsing is strict after the fences are removed: anything other than a
JSON array of objects is rejected rather than coerced into an empty result.
"""

import json
import logging
import re
from typing import Any, Dict, List

from gymbuddy.services.errors import MalformedUpstreamResponseError

logger = logging.getLogger(__name__)

# One opening fence (```json / ```) at the start and one closing fence at the end
_FENCE_PATTERN = re.compile(
    r"^\s*```(?:json)?[ \t]*\n?(.*?)\n?```\s*$",
    re.IGNORECASE | re.DOTALL,
)


def strip_markdown_fences(text: str) -> str:
    """
    Remove a markdown code fence wrapping the whole text, and surrounding whitespace.

    Only the outer markers are removed; backticks inside the content are
    untouched. Text that is not fully wrapped is returned stripped.

    >>> strip_markdown_fences('```json\\n[{"a": 1}]\\n```')
    '[{"a": 1}]'
    """
    match = _FENCE_PATTERN.match(text)
    if match is None:
        return text.strip()
    return match.group(1).strip()


def parse_partner_response(raw_text: str) -> List[Dict[str, Any]]:
    """
    Parse the model's answer into a list of partner records.

    Fields inside each record are not validated here.

    Args:
        raw_text: The text of the model's first candidate

    Returns:
        The parsed records in model order (possibly empty)

    Raises:
        MalformedUpstreamResponseError: If the text is not a JSON array of
            objects. The raw text is attached for diagnosis.
    """
    cleaned = strip_markdown_fences(raw_text)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse partner response JSON: {e}")
        logger.error(f"Raw content: {raw_text[:500]}")
        raise MalformedUpstreamResponseError(
            f"Error parsing Gemini response JSON: {e}",
            raw_response=raw_text,
        )

    if not isinstance(parsed, list):
        logger.error(f"Partner response is not an array: got {type(parsed).__name__}")
        raise MalformedUpstreamResponseError(
            "Error parsing Gemini response JSON: Response is not an array",
            raw_response=raw_text,
        )

    for idx, item in enumerate(parsed):
        if not isinstance(item, dict):
            logger.error(f"Partner response item {idx} is not an object")
            raise MalformedUpstreamResponseError(
                f"Error parsing Gemini response JSON: item {idx} is not an object",
                raw_response=raw_text,
            )

    logger.info(f"Parsed {len(parsed)} partner records from model response")

    return parsed
