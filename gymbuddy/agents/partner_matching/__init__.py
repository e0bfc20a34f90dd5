"""
Workout Partner Matching - single-call LLM ranking

Prompt templates and response parsing for the Gemini-based partner
recommendations. The orchestration lives in:
- gymbuddy/services/recommendation_service.py
"""

from gymbuddy.agents.partner_matching.parser import (
    parse_partner_response,
    strip_markdown_fences,
)
from gymbuddy.agents.partner_matching.prompts import (
    MAX_PARTNER_RECOMMENDATIONS,
    PARTNER_OUTPUT_FIELDS,
    build_partner_prompt,
)

__all__ = [
    "MAX_PARTNER_RECOMMENDATIONS",
    "PARTNER_OUTPUT_FIELDS",
    "build_partner_prompt",
    "parse_partner_response",
    "strip_markdown_fences",
]
