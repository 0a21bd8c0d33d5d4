"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory"]


class StorageConfig(BaseModel):
    """Document store configuration."""

    backend: BackendType = Field(
        default="inmemory",
        description="Document store backend",
    )
