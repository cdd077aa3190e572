"""Configuration for the playground service."""

from __future__ import annotations

from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Settings for the HTTP playground, read from ``CALCEXPR_*`` environment variables.

    Parameters
    ----------
    include_builtins : bool
        Whether request environments start from the builtin constants and functions.
    max_expression_length : int
        Longest expression accepted, in characters.
    log_level : str
        Level passed to ``logging.basicConfig``.
    constants : dict[str, float]
        Extra constants added to every request environment. In the
        environment this is a JSON object, e.g.
        ``CALCEXPR_CONSTANTS='{"g": 9.81}'``.

    Examples
    --------
    >>> AppConfig().max_expression_length
    4096
    """

    model_config = SettingsConfigDict(env_prefix="CALCEXPR_")

    include_builtins: bool = Field(default=True, description="Start from the builtins")
    max_expression_length: int = Field(default=4096, gt=0, description="Longest accepted expression")
    log_level: str = Field(default="INFO", description="Logging level")
    constants: Dict[str, float] = Field(default_factory=dict, description="Extra constants")


def load_config() -> AppConfig:
    return AppConfig()
