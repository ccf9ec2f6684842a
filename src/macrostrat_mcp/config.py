"""
Default gateway configuration.
"""

from functools import lru_cache

from .core.catalog import GatewayConfig, build_tools
from .core.schemas import build_resources
from .prompts import build_prompts


@lru_cache
def default_config() -> GatewayConfig:
    """
    The compiled-in configuration, built once per process.

    Returns
    -------
    GatewayConfig
        Tools, prompts, schema resources and Macrostrat roots
    """
    return GatewayConfig(
        tools=build_tools(),
        prompts=build_prompts(),
        resources=build_resources(),
    )
