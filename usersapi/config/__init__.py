from usersapi.config.properties import (
    ConfigurationProperties,
    get_config,
    log_config_sources,
)

__all__ = [
    "ConfigurationProperties",
    "get_config",
    "log_config_sources",
]
