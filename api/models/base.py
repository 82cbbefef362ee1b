"""Shared base model: snake_case in Python, camelCase on the wire."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every model exchanged with the portal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """JSON-ready dict using the camelCase field names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str
