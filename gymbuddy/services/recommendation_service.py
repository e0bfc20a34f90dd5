"""
Recommendation Service - Workout partner matching with Gemini

Produces a ranked list of workout partners for a user by combining stored
profiles with a single Gemini call.

Pipeline (strictly sequential, all state is request-scoped):
1. gather_candidates: all profiles minus the requester minus current friends
2. request_ai_recommendations: prompt Gemini with the requester and the pool
3. parse_partner_response: strict JSON-array parse of the model text
4. build_fallback_recommendations: deterministic list from the pool when the
   model returns [] (or when the AI circuit is open)
5. filter_by_gym: re-apply the same-gym rule to whatever list we have

Architecture:
- API: Google Gen AI Python SDK (google-genai)
- Each AI attempt is bounded by AI_TIMEOUT_SECONDS
- Transient failures (timeout, 5xx, 429) are retried with exponential backoff
- A process-wide circuit breaker skips the AI while it keeps failing

Error contract (see gymbuddy.services.errors):
- ProfileNotFoundError / NoCandidatesError -> 404
- UpstreamUnavailableError (UpstreamTimeoutError) -> 500 (504)
- MalformedUpstreamResponseError -> 500 with the raw model text attached
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError
from supabase import Client

from gymbuddy.agents.partner_matching import build_partner_prompt, parse_partner_response
from gymbuddy.config import Settings
from gymbuddy.schemas.profile import UserProfile
from gymbuddy.schemas.recommendations import RecommendationItem
from gymbuddy.services.circuit_breaker import AICircuitBreaker
from gymbuddy.services.errors import (
    MalformedUpstreamResponseError,
    NoCandidatesError,
    ProfileNotFoundError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from gymbuddy.services.friend_service import get_friend_ids
from gymbuddy.services.profile_service import get_user_profile, list_all_profiles

logger = logging.getLogger(__name__)

GYM_MATCH_PREFER = "prefer_match"
GYM_MATCH_STRICT = "strict"
GYM_MATCH_POLICIES = (GYM_MATCH_PREFER, GYM_MATCH_STRICT)

FALLBACK_REASON_TEMPLATE = "This user might be a good match because they go to {gym_name}"

# Gemini client cache keyed by API key and HTTP timeout (lazy initialization)
_gemini_clients: Dict[Tuple[str, Optional[float]], genai.Client] = {}

_circuit_breaker: Optional[AICircuitBreaker] = None


def _get_gemini_client(
    api_key: str,
    timeout_seconds: Optional[float] = None,
) -> Optional[genai.Client]:
    """
    Lazy initialization of the Gemini client for the given API key.

    When timeout_seconds is set, the SDK's own HTTP timeout is bounded too,
    so a worker thread abandoned by asyncio.wait_for finishes on its own
    instead of lingering in the default executor.

    Returns None when no key is configured.
    """
    if not api_key:
        logger.warning(
            "GOOGLE_API_KEY not configured. Partner recommendations will not work. "
            "Please set GOOGLE_API_KEY in your .env file."
        )
        return None

    cache_key = (api_key, timeout_seconds)
    client = _gemini_clients.get(cache_key)
    if client is None:
        http_options = None
        if timeout_seconds:
            # Milliseconds; one second past the asyncio bound so wait_for still reports timeouts
            http_options = types.HttpOptions(timeout=int((timeout_seconds + 1) * 1000))
        client = genai.Client(api_key=api_key, http_options=http_options)
        _gemini_clients[cache_key] = client
        logger.info("Gemini client initialized successfully for partner recommendations")

    return client


def get_circuit_breaker(settings: Settings) -> AICircuitBreaker:
    """Return the process-wide AI circuit breaker, creating it on first use."""
    global _circuit_breaker

    if _circuit_breaker is None:
        _circuit_breaker = AICircuitBreaker.from_settings(settings)

    return _circuit_breaker


# =============================================================================
# CANDIDATE GATHERING
# =============================================================================

async def gather_candidates(
    supabase_client: Client,
    user_id: str,
) -> Tuple[UserProfile, List[UserProfile]]:
    """
    Load the requester's profile and the pool of eligible partners.

    The pool is every stored profile except the requester and the
    requester's current friends, in store order.

    Raises:
        ProfileNotFoundError: The requester has no profile
        NoCandidatesError: Nobody is left after the exclusions
    """
    profile_row = await get_user_profile(supabase_client, user_id)
    if not profile_row:
        raise ProfileNotFoundError("User profile not found")

    user_profile = UserProfile.model_validate(profile_row)

    friend_ids = set(await get_friend_ids(supabase_client, user_id))
    logger.info(f"User {user_id} has {len(friend_ids)} friends")

    all_profiles = await list_all_profiles(supabase_client)

    pool: List[UserProfile] = []
    for row in all_profiles:
        candidate_id = str(row.get("user_id", ""))
        if not candidate_id or candidate_id == user_id or candidate_id in friend_ids:
            continue
        pool.append(UserProfile.model_validate(row))

    logger.info(f"Candidate pool for user {user_id}: {len(pool)} users")

    if not pool:
        raise NoCandidatesError("No other users found or all users are already your friends")

    return user_profile, pool


# =============================================================================
# AI CALL
# =============================================================================

def _is_transient(error: Exception) -> bool:
    """Timeouts, server errors and rate limiting are worth retrying."""
    if isinstance(error, asyncio.TimeoutError):
        return True
    if isinstance(error, genai_errors.ServerError):
        return True
    if isinstance(error, genai_errors.ClientError) and getattr(error, "code", None) == 429:
        return True
    return False


def _extract_candidate_text(response: Any) -> str:
    """
    Return candidates[0].content.parts[0].text from a Gemini response.

    Raises:
        UpstreamUnavailableError: If there is no candidate or no text
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        logger.error("Gemini API response does not contain candidates")
        raise UpstreamUnavailableError("Gemini API response does not contain candidates")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content else None
    text = getattr(parts[0], "text", None) if parts else None

    if not text:
        logger.error("Empty text in Gemini response candidate")
        raise UpstreamUnavailableError("Gemini API response candidate has no text")

    return text


async def request_ai_recommendations(
    user_profile: UserProfile,
    candidates: Sequence[UserProfile],
    settings: Settings,
) -> str:
    """
    Ask Gemini to rank the candidates and return its raw text answer.

    Each attempt runs the blocking SDK call in a worker thread bounded by
    settings.AI_TIMEOUT_SECONDS. Transient failures are retried up to
    settings.AI_MAX_RETRIES times with exponential backoff.

    Returns:
        The text of the model's first candidate (not yet parsed)

    Raises:
        UpstreamTimeoutError: Every attempt timed out (last failure was a timeout)
        UpstreamUnavailableError: Not configured, no candidates, or upstream error
    """
    client = _get_gemini_client(settings.GOOGLE_API_KEY, settings.AI_TIMEOUT_SECONDS)
    if client is None:
        raise UpstreamUnavailableError("Recommendation service is not configured")

    prompt = build_partner_prompt(user_profile, candidates)
    contents = [types.Content(role="user", parts=[types.Part(text=prompt)])]
    config = types.GenerateContentConfig(
        temperature=0.2,
        max_output_tokens=2048,
    )

    attempts = settings.AI_MAX_RETRIES + 1
    last_error: Optional[Exception] = None

    for attempt in range(attempts):
        if attempt > 0:
            delay = min(
                settings.AI_RETRY_BACKOFF_SECONDS * (2 ** (attempt - 1)),
                settings.AI_RETRY_BACKOFF_MAX_SECONDS,
            )
            logger.warning(f"Retrying Gemini call in {delay:.2f}s (attempt {attempt + 1}/{attempts})")
            await asyncio.sleep(delay)

        try:
            logger.info(f"Calling Gemini API ({settings.GEMINI_MODEL}) with {len(candidates)} candidates")
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    client.models.generate_content,
                    model=settings.GEMINI_MODEL,
                    contents=contents,
                    config=config,
                ),
                timeout=settings.AI_TIMEOUT_SECONDS,
            )
        except Exception as e:
            last_error = e
            if isinstance(e, asyncio.TimeoutError):
                logger.error(f"Gemini call timed out after {settings.AI_TIMEOUT_SECONDS}s")
            else:
                logger.error(f"Error calling Gemini API: {e}")
            if _is_transient(e):
                continue
            raise UpstreamUnavailableError(f"Error calling Gemini API: {e}")

        return _extract_candidate_text(response)

    if isinstance(last_error, asyncio.TimeoutError):
        raise UpstreamTimeoutError(
            f"Gemini API did not respond within {settings.AI_TIMEOUT_SECONDS}s "
            f"after {attempts} attempts"
        )
    raise UpstreamUnavailableError(f"Gemini API failed after {attempts} attempts: {last_error}")


# =============================================================================
# FALLBACK + FILTER
# =============================================================================

def build_fallback_recommendations(candidates: Sequence[UserProfile]) -> List[RecommendationItem]:
    """
    Turn every candidate into a recommendation, keeping pool order.

    Used when the model returns an empty array or is being skipped.
    """
    return [
        RecommendationItem(
            email=candidate.email,
            username=candidate.username,
            age=candidate.age,
            gym_name=candidate.gym_name,
            bio=candidate.bio,
            reason=FALLBACK_REASON_TEMPLATE.format(gym_name=candidate.gym_name or "your gym"),
            user_id=candidate.user_id,
        )
        for candidate in candidates
    ]


def normalize_gym_name(gym_name: Optional[str]) -> Optional[str]:
    """Trim and lowercase a gym name; blank or missing names become None."""
    if not gym_name or not isinstance(gym_name, str):
        return None
    normalized = gym_name.strip().lower()
    return normalized or None


def filter_by_gym(
    items: Sequence[RecommendationItem],
    requester_gym: Optional[str],
    policy: str = GYM_MATCH_PREFER,
) -> List[RecommendationItem]:
    """
    Keep only partners who train at the requester's gym.

    Comparison ignores case and surrounding whitespace. Items without a gym
    never match, and nothing matches when the requester has no gym.

    Policies:
    - prefer_match: if nobody matches, return the unfiltered list unchanged
    - strict: return the matches only, even if that is empty

    Raises:
        ValueError: Unknown policy name
    """
    if policy not in GYM_MATCH_POLICIES:
        raise ValueError(
            f"Unknown gym match policy {policy!r}, expected one of {', '.join(GYM_MATCH_POLICIES)}"
        )

    target = normalize_gym_name(requester_gym)

    matches = [
        item for item in items
        if target is not None and normalize_gym_name(item.gym_name) == target
    ]

    logger.info(f"Exact gym matches: {len(matches)} of {len(items)}")

    if matches or policy == GYM_MATCH_STRICT:
        return matches

    return list(items)


def _to_recommendation_items(
    records: Sequence[Dict[str, Any]],
    candidates: Sequence[UserProfile],
    raw_text: str,
) -> List[RecommendationItem]:
    """
    Validate parsed model records and attach user ids from the pool by email.

    Raises:
        MalformedUpstreamResponseError: A record has fields of the wrong type
    """
    ids_by_email = {
        c.email.strip().lower(): c.user_id for c in candidates if c.email
    }

    items: List[RecommendationItem] = []
    for idx, record in enumerate(records):
        try:
            item = RecommendationItem.model_validate(record)
        except ValidationError as e:
            logger.error(f"Partner record {idx} failed validation: {e.error_count()} errors")
            raise MalformedUpstreamResponseError(
                f"Error parsing Gemini response JSON: item {idx} has invalid fields",
                raw_response=raw_text,
            )

        if item.user_id is None and item.email:
            item.user_id = ids_by_email.get(item.email.strip().lower())

        items.append(item)

    return items


# =============================================================================
# ORCHESTRATION
# =============================================================================

async def get_recommended_partners(
    supabase_client: Client,
    user_id: str,
    settings: Settings,
    circuit_breaker: Optional[AICircuitBreaker] = None,
) -> List[RecommendationItem]:
    """
    Recommend workout partners for a user.

    Steps:
    1. Gather the candidate pool (404-style errors if empty or no profile)
    2. Ask Gemini to rank the pool, unless the AI circuit is open
    3. Parse the answer strictly; malformed output aborts the request
    4. Empty answer (or open circuit) -> deterministic fallback from the pool
    5. Apply the gym filter with settings.GYM_MATCH_POLICY

    Args:
        supabase_client: Authenticated Supabase client
        user_id: User UUID from auth token
        settings: Application settings (API key, model, bounds, gym policy)
        circuit_breaker: Shared AI circuit breaker (optional)

    Returns:
        Ordered list of RecommendationItem

    Raises:
        ProfileNotFoundError, NoCandidatesError, UpstreamUnavailableError,
        UpstreamTimeoutError, MalformedUpstreamResponseError
    """
    logger.info(f"get_recommended_partners called for user_id={user_id}")

    user_profile, candidates = await gather_candidates(supabase_client, user_id)

    if circuit_breaker is not None and not circuit_breaker.allow_request():
        logger.warning("AI circuit open, using filtered users directly")
        recommendations = build_fallback_recommendations(candidates)
    else:
        try:
            raw_text = await request_ai_recommendations(user_profile, candidates, settings)
        except UpstreamUnavailableError:
            if circuit_breaker is not None:
                circuit_breaker.record_failure()
            raise
        except BaseException:
            # Cancelled or failed before Gemini answered: free a half-open trial slot
            if circuit_breaker is not None:
                circuit_breaker.release_trial()
            raise

        if circuit_breaker is not None:
            circuit_breaker.record_success()

        records = parse_partner_response(raw_text)
        logger.info(f"Number of recommendations before filtering: {len(records)}")

        if records:
            recommendations = _to_recommendation_items(records, candidates, raw_text)
        else:
            logger.info("No recommendations from Gemini, using filtered users directly")
            recommendations = build_fallback_recommendations(candidates)

    final = filter_by_gym(recommendations, user_profile.gym_name, settings.GYM_MATCH_POLICY)
    logger.info(f"Final recommendations count: {len(final)}")

    return final
