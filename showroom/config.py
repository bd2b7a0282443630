"""
Config system - layered, typed settings.

Precedence (later overrides earlier):
    defaults < .env file < environment variables < explicit overrides

Environment keys carry the ``SHOWROOM_`` prefix (``SHOWROOM_DATABASE_URL``);
the conventional unprefixed ``PORT`` variable is honoured as well.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union, get_args, get_origin, get_type_hints

from dotenv import dotenv_values


MAIL_PROVIDERS = ("console", "smtp")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class Settings:
    database_url: str = "sqlite:///showroom.sqlite3"

    token_secret: str = "MY_SECRET_REFRESH_KEY"
    token_ttl: int = 86400
    cookie_secure: bool = False

    hash_time_cost: int = 2
    hash_memory_cost: int = 65536
    hash_parallelism: int = 4

    media_root: str = "media"
    media_url: str = "/media"

    mail_provider: str = "console"
    mail_from: str = "onboarding@showroom.local"
    mail_to: str = "shop@showroom.local"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000

    def __post_init__(self):
        self.mail_provider = self.mail_provider.lower()
        if self.mail_provider not in MAIL_PROVIDERS:
            raise ConfigError(
                f"Unknown mail provider '{self.mail_provider}' "
                f"(expected one of {', '.join(MAIL_PROVIDERS)})"
            )
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level '{self.log_level}'")
        if not 0 < self.port < 65536:
            raise ConfigError(f"Port out of range: {self.port}")
        if self.token_ttl <= 0:
            raise ConfigError("token_ttl must be positive")
        if not self.token_secret:
            raise ConfigError("token_secret must not be empty")


class ConfigLoader:
    """
    Loads and merges settings from multiple sources.

    Usage:
        settings = ConfigLoader.load(env_file=".env")
        settings = ConfigLoader.load(overrides={"database_url": "sqlite:///:memory:"})
    """

    def __init__(self, env_prefix: str = "SHOWROOM_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_file: Optional[str] = None,
        env_prefix: str = "SHOWROOM_",
        overrides: Optional[Dict[str, Any]] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> Settings:
        """
        Build validated ``Settings``.

        Args:
            env_file: Path to a .env file (ignored when missing)
            env_prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)
            environ: Environment mapping (defaults to ``os.environ``)

        Raises:
            ConfigError: A value has the wrong type or is out of range
        """
        loader = cls(env_prefix=env_prefix)
        environ = os.environ if environ is None else environ

        if env_file:
            loader._load_mapping(dotenv_values(env_file))
        if "PORT" in environ:
            loader.config_data["port"] = environ["PORT"]
        loader._load_mapping(environ)
        if overrides:
            loader.config_data.update(overrides)

        return loader._instantiate(Settings)

    def _load_mapping(self, values: Dict[str, Optional[str]]) -> None:
        known = {f.name for f in fields(Settings)}
        for key, value in values.items():
            if not key.startswith(self.env_prefix) or value is None:
                continue
            name = key[len(self.env_prefix):].lower()
            if name in known:
                self.config_data[name] = value

    def _instantiate(self, config_class: type) -> Any:
        hints = get_type_hints(config_class)
        kwargs: Dict[str, Any] = {}
        for field_info in fields(config_class):
            if field_info.name not in self.config_data:
                continue
            kwargs[field_info.name] = self._coerce(
                field_info.name, self.config_data[field_info.name], hints[field_info.name]
            )
        settings = config_class(**kwargs)
        logging.getLogger("showroom.config").debug(
            f"Loaded settings from {len(kwargs)} configured value(s)"
        )
        return settings

    @staticmethod
    def _coerce(name: str, value: Any, field_type: Any) -> Any:
        if get_origin(field_type) is Union:
            if value is None or value == "":
                return None
            field_type = next(t for t in get_args(field_type) if t is not type(None))

        if field_type is bool:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in ("true", "yes", "1", "on"):
                return True
            if text in ("false", "no", "0", "off"):
                return False
            raise ConfigError(f"Config field '{name}' expected bool, got {value!r}")

        if field_type is int:
            if isinstance(value, bool):
                raise ConfigError(f"Config field '{name}' expected int, got {value!r}")
            try:
                return int(value)
            except (TypeError, ValueError):
                raise ConfigError(f"Config field '{name}' expected int, got {value!r}")

        if field_type is str:
            if not isinstance(value, str):
                raise ConfigError(
                    f"Config field '{name}' expected str, got {type(value).__name__}"
                )
            return value

        return value
