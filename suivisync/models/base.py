"""Shared pydantic base for Suivi wire models.

Attributes are snake_case in Python and camelCase on the wire
(`dueDate`, `quickActions`, ...). Both spellings are accepted on input.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class SuiviModel(BaseModel):
    """Base model with camelCase aliases."""

    class Config:
        """Pydantic configuration."""
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True

    def to_wire(self) -> dict:
        """Serialize to the JSON shape used by the remote task service."""
        return self.model_dump(mode="json", by_alias=True)
