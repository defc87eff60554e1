"""Shared base model: snake_case in Python, camelCase on the wire."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase field names (domainId, createdAt, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
