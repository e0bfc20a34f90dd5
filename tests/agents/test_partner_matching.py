"""
Tests for the partner-matching prompt builder and response parser.

Covers:
- Markdown fence stripping (no-op on plain text, exact removal of markers)
- Strict JSON-array parsing and rejection of every other shape
- Prompt content (gym priority, limits, embedded profiles)
"""

import json

import pytest

from gymbuddy.agents.partner_matching import (
    MAX_PARTNER_RECOMMENDATIONS,
    build_partner_prompt,
    parse_partner_response,
    strip_markdown_fences,
)
from gymbuddy.schemas.profile import UserProfile
from gymbuddy.services.errors import MalformedUpstreamResponseError


VALID_JSON = '[{"email": "a@example.com", "username": "alex", "gymName": "Gold\'s Gym", "reason": "Same gym"}]'


# =============================================================================
# UNIT TESTS: Fence stripping
# =============================================================================

class TestStripMarkdownFences:
    """Tests for strip_markdown_fences."""

    def test_no_fences_is_noop(self):
        assert strip_markdown_fences(VALID_JSON) == VALID_JSON

    def test_empty_array_without_fences(self):
        assert strip_markdown_fences("[]") == "[]"

    def test_json_fenced_wrapper_round_trip(self):
        wrapped = f"```json\n{VALID_JSON}\n```"
        assert strip_markdown_fences(wrapped) == VALID_JSON

    def test_plain_fenced_wrapper_round_trip(self):
        wrapped = f"```\n{VALID_JSON}\n```"
        assert strip_markdown_fences(wrapped) == VALID_JSON

    def test_uppercase_language_tag(self):
        wrapped = f"```JSON\n{VALID_JSON}\n```"
        assert strip_markdown_fences(wrapped) == VALID_JSON

    def test_surrounding_whitespace_removed(self):
        wrapped = f"\n\n  ```json\n{VALID_JSON}\n```  \n"
        assert strip_markdown_fences(wrapped) == VALID_JSON

    def test_content_is_not_touched(self):
        text = '[{"bio": "json lover"}]'
        assert strip_markdown_fences(f"```json\n{text}\n```") == text

    def test_backticks_inside_values_are_kept(self):
        text = '[{"username": "dev", "bio": "I write ```python``` snippets"}]'

        assert strip_markdown_fences(f"```json\n{text}\n```") == text
        assert strip_markdown_fences(text) == text
        assert parse_partner_response(f"```json\n{text}\n```")[0]["bio"] == "I write ```python``` snippets"

    def test_unclosed_fence_left_in_place(self):
        text = "```json\n[]"
        assert strip_markdown_fences(text) == text


# =============================================================================
# UNIT TESTS: Parsing
# =============================================================================

class TestParsePartnerResponse:
    """Tests for parse_partner_response."""

    def test_parses_plain_array(self):
        result = parse_partner_response(VALID_JSON)
        assert len(result) == 1
        assert result[0]["username"] == "alex"

    def test_parses_fenced_array(self):
        result = parse_partner_response(f"```json\n{VALID_JSON}\n```")
        assert result == json.loads(VALID_JSON)

    def test_empty_array_is_valid(self):
        assert parse_partner_response("[]") == []

    def test_fenced_empty_array_is_valid(self):
        assert parse_partner_response("```json\n[]\n```") == []

    def test_preserves_model_order(self):
        raw = json.dumps([{"username": "b"}, {"username": "a"}, {"username": "c"}])
        result = parse_partner_response(raw)
        assert [r["username"] for r in result] == ["b", "a", "c"]

    def test_missing_fields_are_tolerated(self):
        result = parse_partner_response('[{"username": "only-name"}]')
        assert result == [{"username": "only-name"}]

    @pytest.mark.parametrize("raw", [
        "{}",
        '{"users": []}',
        '"just a string"',
        "42",
        "null",
        "true",
        '[{"username": "a"},]',
        "[{'username': 'a'}]",
        "",
        "I could not find any compatible users at this gym.",
    ])
    def test_malformed_inputs_raise(self, raw):
        with pytest.raises(MalformedUpstreamResponseError):
            parse_partner_response(raw)

    def test_non_object_items_raise(self):
        with pytest.raises(MalformedUpstreamResponseError):
            parse_partner_response('["alex", "sam"]')

    def test_raw_text_attached_to_error(self):
        prose = "Sure! Here are some great partners for you."
        with pytest.raises(MalformedUpstreamResponseError) as exc_info:
            parse_partner_response(prose)

        assert exc_info.value.raw_response == prose
        assert exc_info.value.to_dict()["raw_response"] == prose
        assert exc_info.value.status_code == 500

    def test_object_root_error_message(self):
        with pytest.raises(MalformedUpstreamResponseError) as exc_info:
            parse_partner_response("{}")

        assert "not an array" in exc_info.value.details


# =============================================================================
# UNIT TESTS: Prompt Building
# =============================================================================

class TestBuildPartnerPrompt:
    """Tests for build_partner_prompt."""

    @pytest.fixture
    def candidates(self):
        return [
            UserProfile(user_id="u1", email="alex@example.com", username="alex", age=30,
                        gym_name="Gold's Gym", bio="Deadlifts", profile_picture="https://img/x.png"),
            UserProfile(user_id="u2", email="sam@example.com", username="sam", gym_name="Planet Fitness"),
        ]

    def test_includes_requester_and_candidates(self, requester_profile, candidates):
        prompt = build_partner_prompt(requester_profile, candidates)

        assert "tester" in prompt
        assert "alex@example.com" in prompt
        assert "sam@example.com" in prompt
        assert "Planet Fitness" in prompt

    def test_uses_camel_case_fields(self, requester_profile, candidates):
        prompt = build_partner_prompt(requester_profile, candidates)

        assert '"gymName"' in prompt
        assert '"userId"' in prompt
        assert "gym_name" not in prompt

    def test_gym_rule_is_highest_priority(self, requester_profile, candidates):
        prompt = build_partner_prompt(requester_profile, candidates)

        assert "EXACT SAME gym name" in prompt
        assert "highest priority" in prompt

    def test_limits_and_no_fabrication(self, requester_profile, candidates):
        prompt = build_partner_prompt(requester_profile, candidates)

        assert f"up to {MAX_PARTNER_RECOMMENDATIONS}" in prompt
        assert "Do not create fictional users" in prompt

    def test_requests_raw_json_array(self, requester_profile, candidates):
        prompt = build_partner_prompt(requester_profile, candidates)

        assert "raw JSON array with NO markdown" in prompt
        assert "return an empty array []" in prompt
        for field in ("email", "username", "age", "gymName", "bio", "reason"):
            assert f'"{field}"' in prompt

    def test_profile_picture_not_sent(self, requester_profile, candidates):
        prompt = build_partner_prompt(requester_profile, candidates)

        assert "https://img/x.png" not in prompt
