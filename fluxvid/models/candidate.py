from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ModelCandidate(BaseModel):
    """One invocable model from the registry, as shown in the model picker."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    last_modified: str
    downloads: int = 0
    likes: int = 0


class ModelsResponse(BaseModel):
    models: list[ModelCandidate]
