"""
Workout Partner Matching Prompt Templates

Builds the single-turn prompt sent to Gemini to rank candidate workout
partners for a user.

Architecture:
- Pattern: single LLM call, JSON answer parsed from text
- Model: Gemini flash (configured via GEMINI_MODEL)
- Output: raw JSON array of partner objects (see PARTNER_OUTPUT_FIELDS)

The model's answer is treated as untrusted text: it is parsed and validated by
gymbuddy.agents.partner_matching.parser and the gym rule is re-applied by the
recommendation service.
"""

import json
from typing import Any, Dict, List, Sequence

from gymbuddy.schemas.profile import UserProfile

MAX_PARTNER_RECOMMENDATIONS = 5

PARTNER_OUTPUT_FIELDS = ("email", "username", "age", "gymName", "bio", "reason")

# Profile fields that carry no matching signal
_PROMPT_EXCLUDED_FIELDS = {"profile_picture"}


def _profile_for_prompt(profile: UserProfile) -> Dict[str, Any]:
    return profile.model_dump(
        mode="json",
        by_alias=True,
        exclude_none=True,
        exclude=_PROMPT_EXCLUDED_FIELDS,
    )


def build_partner_prompt(
    user_profile: UserProfile,
    candidates: Sequence[UserProfile],
) -> str:
    """
    Build the partner-matching prompt.

    The prompt embeds the requester and every candidate as JSON and asks for
    at most MAX_PARTNER_RECOMMENDATIONS same-gym partners, ranked by age
    similarity and shared interests, as a bare JSON array.

    Args:
        user_profile: The requesting user's profile
        candidates: Eligible users (already excludes the requester and friends)

    Returns:
        str: Prompt text for a single user-role message
    """
    current_user = json.dumps(_profile_for_prompt(user_profile), ensure_ascii=False)
    available_users: List[Dict[str, Any]] = [_profile_for_prompt(c) for c in candidates]
    available_json = json.dumps(available_users, ensure_ascii=False)

    fields_schema = """{
  "email": "user's email",
  "username": "user's name",
  "age": "user's age",
  "gymName": "EXACT gym name from their profile",
  "bio": "user's bio",
  "reason": "A personalized 1-2 sentence explanation of why this person would be a good workout partner for the user"
}"""

    return f"""As a fitness AI, analyze this user profile and suggest compatible workout partners.

<current_user>
{current_user}
</current_user>

<available_users>
{available_json}
</available_users>

<critical_requirements>
IMPORTANT: Only include users that have the EXACT SAME gym name as the current user.

Return a JSON array of up to {MAX_PARTNER_RECOMMENDATIONS} most compatible users.
Do not create fictional users or placeholders if fewer than {MAX_PARTNER_RECOMMENDATIONS} users match the criteria.
</critical_requirements>

<ranking>
Base compatibility on:
1. Must have the same gym name (case-insensitive match) - this is the highest priority
2. Similar age (if available)
3. Similar interests from bio (if available)
</ranking>

<output_format>
Include ONLY these fields in each user object:
{fields_schema}

Format your response as a raw JSON array with NO markdown formatting or extra text.
If no users match the criteria, return an empty array [].
</output_format>"""
