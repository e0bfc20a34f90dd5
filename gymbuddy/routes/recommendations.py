"""
FastAPI routes for workout-partner recommendations.

Endpoints:
- GET /recommendations/partners: ranked list of suggested workout partners

Pipeline failures are raised as RecommendationError subclasses and rendered
by the handler registered in gymbuddy.main as {"error", "details"}.
"""

import logging
from typing import Annotated, List
from fastapi import APIRouter, Depends

from gymbuddy.auth.dependencies import get_authenticated_user, AuthenticatedUser
from gymbuddy.config import Settings, get_settings
from gymbuddy.db.client import get_supabase_client
from gymbuddy.schemas.recommendations import RecommendationItem
from gymbuddy.services.errors import RecommendationError
from gymbuddy.services.recommendation_service import (
    get_circuit_breaker,
    get_recommended_partners,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/recommendations",
    tags=["recommendations"]
)


@router.get(
    "/partners",
    response_model=List[RecommendationItem],
    response_model_exclude_none=True,
    status_code=200,
    summary="Recommend workout partners",
    description="""
    Returns up to a handful of suggested workout partners for the caller.

    **Authentication:** Required (Bearer token)

    **Behavior:**
    - Candidates are all users except the caller and the caller's friends
    - Gemini ranks candidates (same gym first, then age and interests)
    - If Gemini suggests nobody, every candidate is returned with a generic reason
    - Results are narrowed to users at the caller's gym when any exist

    **Errors:**
    - 404 not_found: caller has no profile
    - 404 no_candidates: no other users, or all are already friends
    - 500 upstream_unavailable / 504 upstream_timeout: Gemini failed
    - 500 malformed_upstream_response: Gemini answered with invalid JSON
      (raw_response is included for diagnosis)
    """
)
async def get_partner_recommendations_endpoint(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> List[RecommendationItem]:
    """
    Partner recommendation endpoint.

    - Auth: Handled by get_authenticated_user dependency
    - Parse/Validate: No request body
    - Call LLM: Single Gemini call via service layer (bounded, retried)
    - Map output: Service layer returns RecommendationItem list
    """
    logger.info(f"GET /recommendations/partners called by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        recommendations = await get_recommended_partners(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            settings=settings,
            circuit_breaker=get_circuit_breaker(settings),
        )
    except RecommendationError:
        raise
    except Exception as e:
        logger.error(f"Error fetching recommendations for user {auth_user.user_id}: {e}", exc_info=True)
        raise RecommendationError("Error fetching recommendations") from e

    logger.info(f"Returning {len(recommendations)} recommendations")
    return recommendations
