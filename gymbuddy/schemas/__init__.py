"""
Pydantic schemas for API request and response validation.

Field names are snake_case in Python and camelCase on the wire
(see CamelModel), matching what the mobile client sends and reads.
"""

from .base import CamelModel

__all__ = ["CamelModel"]
