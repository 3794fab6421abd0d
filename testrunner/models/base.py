"""Base model configuration for validated supervisor inputs."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base for the parsed command line (options and child argv).

    Instances are frozen so the invocation cannot change after parsing, and
    unknown fields are rejected so a misspelled option key fails loudly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
