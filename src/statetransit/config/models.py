"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, statetransit.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_VALIDATOR_NAME = "can_transit"
DEFAULT_MESSAGE = "cannot transit from {old} to {new}"
DEFAULT_ABSENT_TOKEN = "None"


class ValidatorConfig(BaseModel):
    """[validator] section."""

    model_config = {"frozen": True}

    name: str = DEFAULT_VALIDATOR_NAME
    message: str = DEFAULT_MESSAGE
    required: bool = True
    absent_token: str = DEFAULT_ABSENT_TOKEN

