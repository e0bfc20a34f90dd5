"""
Pydantic schemas for workout-partner recommendations.

Items come either from the Gemini model (untrusted JSON) or from the
deterministic fallback built out of stored profiles, so every field is
optional and unknown fields are ignored.
"""

from typing import Optional, Union
from pydantic import Field
from pydantic.alias_generators import to_camel

from gymbuddy.schemas.base import CamelModel


class RecommendationItem(CamelModel):
    """
    A suggested workout partner.

    `age` is kept as-is when the model returns it as a string ("25").
    """
    email: Optional[str] = Field(None, description="Candidate's email")
    username: Optional[str] = Field(None, description="Candidate's display name")
    age: Optional[Union[int, float, str]] = Field(None, description="Candidate's age")
    gym_name: Optional[str] = Field(None, description="Candidate's gym, as stored or as returned by the model")
    bio: Optional[str] = Field(None, description="Candidate's bio")
    reason: Optional[str] = Field(
        None,
        description="Short human-readable explanation of why this is a good partner",
        examples=["You both train at Gold's Gym and enjoy early morning lifting."]
    )
    user_id: Optional[str] = Field(None, description="Candidate's user UUID, when known")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
        "json_schema_extra": {
            "examples": [
                {
                    "email": "sam@example.com",
                    "username": "sam",
                    "age": 27,
                    "gymName": "Gold's Gym",
                    "bio": "Powerlifting, 6am sessions",
                    "reason": "You both train at Gold's Gym and prefer early sessions.",
                    "userId": "38f7d540-23fa-497a-8df2-3ab9cbe13da5"
                }
            ]
        }
    }
