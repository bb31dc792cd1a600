"""Base model for configuration and execution inputs."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model rejecting unknown fields, so typos in config surface."""

    model_config = ConfigDict(frozen=True, extra="forbid")
