"""
Shared base model: snake_case in Python, camelCase on disk (browser storage format)
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> dict:
        """JSON-safe dict with the camelCase keys used by the stored documents."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
