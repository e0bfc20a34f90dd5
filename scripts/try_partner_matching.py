#!/usr/bin/env python3
"""
Partner Matching Local Script

Runs the workout-partner recommendation pipeline against the real Gemini API
with an in-memory set of users, so prompt and filter changes can be checked
without Supabase or the mobile app.

Usage:
    python scripts/try_partner_matching.py
    python scripts/try_partner_matching.py --gym "Planet Fitness" --policy strict
    python scripts/try_partner_matching.py --friends u-2 u-3
"""

import argparse
import asyncio
import json
from typing import Any, Dict, List
from unittest.mock import MagicMock

from dotenv import load_dotenv

load_dotenv()

from gymbuddy.config import Settings  # noqa: E402
from gymbuddy.services.circuit_breaker import AICircuitBreaker  # noqa: E402
from gymbuddy.services.errors import RecommendationError  # noqa: E402
from gymbuddy.services.recommendation_service import get_recommended_partners  # noqa: E402
from gymbuddy.utils.logging import configure_logging  # noqa: E402

REQUESTER_ID = "u-me"

SAMPLE_USERS: List[Dict[str, Any]] = [
    {"user_id": "u-1", "email": "ana@example.com", "username": "ana", "age": 24,
     "gym_name": "Gold's Gym", "bio": "Olympic lifting, early mornings"},
    {"user_id": "u-2", "email": "ben@example.com", "username": "ben", "age": 31,
     "gym_name": "Planet Fitness", "bio": "Cardio and circuit training"},
    {"user_id": "u-3", "email": "cara@example.com", "username": "cara", "age": 27,
     "gym_name": "gold's gym", "bio": "Powerlifting meets, squat PRs"},
    {"user_id": "u-4", "email": "dev@example.com", "username": "dev", "age": 45,
     "gym_name": None, "bio": "Home workouts and running"},
]


def create_mock_supabase_client(requester: Dict[str, Any], friend_ids: List[str]) -> MagicMock:
    """
    Create a mock Supabase client serving the sample users and friend list.

    The users table answers .eq() lookups by user_id and plain selects with
    every row.
    """
    rows = [requester] + SAMPLE_USERS

    users = MagicMock()
    users.select.return_value.execute.return_value = MagicMock(data=rows)
    users.select.return_value.eq.side_effect = lambda column, value: MagicMock(
        execute=MagicMock(return_value=MagicMock(data=[r for r in rows if r.get(column) == value]))
    )

    friends = MagicMock()
    friends.select.return_value.eq.return_value.execute.return_value = MagicMock(
        data=[{"friend_id": fid, "name": fid, "added_at": None} for fid in friend_ids]
    )

    client = MagicMock()
    client.table.side_effect = lambda name: users if name == "users" else friends
    return client


async def run(gym: str, policy: str, friend_ids: List[str]) -> None:
    settings = Settings.from_env()
    settings.GYM_MATCH_POLICY = policy

    if not settings.GOOGLE_API_KEY:
        print("\nERROR: GOOGLE_API_KEY environment variable not set!")
        print("   Please set it in your .env file or export it:")
        print("   export GOOGLE_API_KEY=your-gemini-api-key")
        return

    requester = {
        "user_id": REQUESTER_ID, "email": "me@example.com", "username": "me",
        "age": 26, "gym_name": gym, "bio": "Strength training, 3x per week",
    }

    print("\n" + "=" * 60)
    print("PARTNER MATCHING TEST (Gemini)")
    print("=" * 60)
    print(f"Gym:      {gym}")
    print(f"Policy:   {policy}")
    print(f"Friends:  {', '.join(friend_ids) or '-'}")
    print(f"Model:    {settings.GEMINI_MODEL}\n")

    client = create_mock_supabase_client(requester, friend_ids)

    try:
        results = await get_recommended_partners(
            supabase_client=client,
            user_id=REQUESTER_ID,
            settings=settings,
            circuit_breaker=AICircuitBreaker.from_settings(settings),
        )
    except RecommendationError as e:
        print(json.dumps(e.to_dict(), indent=2))
        return

    print(f"Found {len(results)} partner(s):\n")
    for i, item in enumerate(results, 1):
        print(f"--- Partner #{i} ---")
        print(f"  Username: {item.username}")
        print(f"  Gym:      {item.gym_name}")
        print(f"  Age:      {item.age}")
        print(f"  Reason:   {item.reason}")
        print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Try the partner matching pipeline locally")
    parser.add_argument("--gym", default="Gold's Gym", help="Requester's gym name")
    parser.add_argument("--policy", default="prefer_match", choices=["prefer_match", "strict"])
    parser.add_argument("--friends", nargs="*", default=[], help="User ids to treat as friends")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    configure_logging(args.log_level)
    asyncio.run(run(args.gym, args.policy, args.friends))


if __name__ == "__main__":
    main()
