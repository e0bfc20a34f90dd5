"""
Shared base model for wire-facing schemas.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    BaseModel that reads and writes camelCase JSON.

    Attributes stay snake_case, so rows coming back from the database
    (snake_case columns) validate directly with model_validate().
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }
