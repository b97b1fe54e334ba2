"""Schema Base - camelCase wire names over snake_case attributes.

Invariants:
    - Every API schema serializes with camelCase aliases (tagList, favoritesCount, createdAt)
    - Schemas accept both alias and attribute names on input
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request/response schemas using the RealWorld JSON field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
