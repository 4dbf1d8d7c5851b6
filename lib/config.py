#!/usr/bin/env python3
"""
OmegaConf-based configuration for the external IP notifier.

Hierarchical YAML configs:
- config/default.yaml: Safe defaults, secrets pulled from the environment
- config/local.yaml: Local overrides (gitignored)

Usage:
    from lib.config import get_config

    cfg = get_config()
    services = cfg.ip_watch.echo_services
    recipient = cfg.email.to_addr
"""

import os
from dataclasses import dataclass, is_dataclass
from enum import StrEnum
from typing import get_origin, get_args

from omegaconf import OmegaConf


class Channel(StrEnum):
    """Notification channel"""

    EMAIL = "email"
    PUSHOVER = "pushover"


@dataclass
class PathsConfig:
    """File paths and directories"""

    state_file: str
    logging_dir: str


@dataclass
class EmailConfig:
    """SMTP relay configuration"""

    from_addr: str
    to_addr: str
    smtp_host: str
    smtp_port: int
    smtp_username: str
    smtp_password: str
    use_ssl: bool = False


@dataclass
class PushoverConfig:
    """Pushover notification configuration"""

    user: str
    token: str
    title: str = "External IP Address"


@dataclass
class IpWatchConfig:
    """Echo services and notification throttling"""

    echo_services: list[str]
    num_services: int
    burst_limit: int
    fetch_timeout: int
    channel: Channel


@dataclass
class Config:
    """Root configuration"""

    paths: PathsConfig
    email: EmailConfig
    pushover: PushoverConfig
    ip_watch: IpWatchConfig


# Singleton configuration instance
_config: Config | None = None


def _config_dir() -> str:
    override = os.environ.get("IPWATCH_CONFIG_DIR")
    if override:
        return os.path.abspath(override)
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../config"))


def get_config() -> Config:
    """
    Get application configuration singleton.

    Loads from config/default.yaml with optional config/local.yaml overrides.
    ${oc.env:...} interpolations are resolved against the process environment
    at load time. Config is cached after first load.

    Returns:
        Config: Application configuration
    """
    global _config
    if _config is None:
        config_dir = _config_dir()

        default_path = os.path.join(config_dir, "default.yaml")
        local_path = os.path.join(config_dir, "local.yaml")

        cfg_omega = OmegaConf.load(default_path)

        if os.path.exists(local_path):
            local_cfg = OmegaConf.load(local_path)
            cfg_omega = OmegaConf.merge(cfg_omega, local_cfg)

        cfg_dict = OmegaConf.to_container(cfg_omega, resolve=True)
        _config = _dict_to_config(cfg_dict)

    return _config


def _dict_to_config(cfg_dict: dict) -> Config:  # type: ignore
    """
    Convert configuration dictionary to Config dataclass.

    Handles nested dataclass construction.
    """

    def build_nested(data: dict, cls: type) -> object:  # type: ignore
        """Recursively build nested dataclasses"""
        kwargs = {}
        for field_name, field_type in cls.__annotations__.items():
            if field_name not in data:
                continue

            value = data[field_name]
            origin = get_origin(field_type)

            if origin is list:
                args = get_args(field_type)
                if args and is_dataclass(args[0]):
                    item_class = args[0]
                    kwargs[field_name] = [build_nested(item, item_class) for item in value]
                else:
                    kwargs[field_name] = list(value)
            elif is_dataclass(field_type):
                kwargs[field_name] = build_nested(value, field_type)
            elif isinstance(field_type, type) and issubclass(field_type, StrEnum):
                kwargs[field_name] = field_type(value)
            elif field_type is int:
                # env interpolations arrive as strings
                kwargs[field_name] = int(value)
            elif field_type is bool and isinstance(value, str):
                kwargs[field_name] = value.strip().lower() in ("1", "true", "yes", "on")
            else:
                kwargs[field_name] = value

        return cls(**kwargs)

    return build_nested(cfg_dict, Config)  # type: ignore


def reset_config() -> None:
    """Reset configuration singleton (useful for testing)"""
    global _config
    _config = None
