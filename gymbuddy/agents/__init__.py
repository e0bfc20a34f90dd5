"""
AI Components for GymBuddy Backend.

1. Partner Matching (single-call LLM)
   - Gemini ranks candidate workout partners for a user
   - Prompt building and strict JSON parsing live in agents/partner_matching
   - Orchestration lives in: gymbuddy/services/recommendation_service.py

The model output is never trusted directly: it is parsed strictly, the gym
rule is re-applied, and a deterministic fallback exists for when the model
returns nothing.
"""

from gymbuddy.agents.partner_matching import (
    build_partner_prompt,
    parse_partner_response,
    strip_markdown_fences,
)

__all__ = [
    "build_partner_prompt",
    "parse_partner_response",
    "strip_markdown_fences",
]
