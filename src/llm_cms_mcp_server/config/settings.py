"""
Configuration management for LLM CMS MCP Server.

Handles loading, validation, and management of server configuration
from files and environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

STORE_BACKENDS = ("mongodb", "memory")


def _resolve_env_placeholder(value: Optional[str], default_env: str) -> Optional[str]:
    """Resolve ``None`` or a ``${VAR}`` placeholder from the environment."""
    if value is None:
        return os.getenv(default_env)
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return os.getenv(value[2:-1])
    return value


class StoreConfig(BaseModel):
    """Configuration for the post store backend."""

    backend: str = Field(default="mongodb", description="Store backend: mongodb or memory")
    mongo_uri: Optional[str] = Field(
        default=None, validate_default=True, description="MongoDB connection URI"
    )
    db_name: Optional[str] = Field(
        default=None, validate_default=True, description="MongoDB database name"
    )
    collection: str = Field(default="posts", description="Collection holding posts")
    server_selection_timeout_ms: int = Field(
        default=5000, description="MongoDB server selection timeout in milliseconds"
    )

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate store backend."""
        v_lower = v.lower()
        if v_lower not in STORE_BACKENDS:
            raise ValueError(f"Invalid store backend: {v}. Must be one of {list(STORE_BACKENDS)}")
        return v_lower

    @field_validator("mongo_uri", mode="before")
    @classmethod
    def resolve_mongo_uri(cls, v: Optional[str]) -> Optional[str]:
        """Resolve MongoDB URI from environment variable if needed."""
        return _resolve_env_placeholder(v, "MONGO_URI")

    @field_validator("db_name", mode="before")
    @classmethod
    def resolve_db_name(cls, v: Optional[str]) -> str:
        """Resolve database name from environment variable if needed."""
        return _resolve_env_placeholder(v, "DB_NAME") or "chatcms"


class ServerConfig(BaseModel):
    """Configuration for MCP server behavior."""

    name: str = Field(default="llm-cms-server", description="Server name reported to clients")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class ToolConfig(BaseModel):
    """Configuration for individual tools."""

    enabled: bool = Field(default=True, description="Whether tool is enabled")
    max_results: int = Field(default=100, ge=1, description="Maximum results to return")
    default_limit: int = Field(default=10, ge=1, description="Default result limit")


class ToolsConfig(BaseModel):
    """Configuration for all available tools."""

    create_post: ToolConfig = Field(default_factory=ToolConfig)
    list_posts: ToolConfig = Field(default_factory=ToolConfig)
    get_post: ToolConfig = Field(default_factory=ToolConfig)
    update_post: ToolConfig = Field(default_factory=ToolConfig)
    delete_post: ToolConfig = Field(default_factory=ToolConfig)


class Config(BaseModel):
    """Main configuration object."""

    model_config = ConfigDict(extra="forbid")

    version: str = Field(default="1.0.0", description="Configuration version")
    store: StoreConfig = Field(default_factory=StoreConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from file and environment variables.

    A ``.env`` file in the working directory is loaded first, without
    overriding variables already present in the environment.

    Args:
        config_path: Path to configuration file. If None, looks for
                    LLM_CMS_CONFIG_PATH environment variable.

    Returns:
        Loaded and validated configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    load_dotenv(override=False)

    if config_path is None:
        env_path = os.getenv("LLM_CMS_CONFIG_PATH")
        if env_path:
            config_path = Path(env_path)

    config_data: Dict[str, Any] = {}
    if config_path and config_path.exists():
        with open(config_path, "r") as f:
            config_data = json.load(f)
    elif config_path:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    env_overrides: Dict[str, Any] = {}

    log_level = os.getenv("LLM_CMS_LOG_LEVEL")
    if log_level:
        env_overrides.setdefault("server", {})["log_level"] = log_level

    backend = os.getenv("LLM_CMS_STORE_BACKEND")
    if backend:
        env_overrides.setdefault("store", {})["backend"] = backend

    if env_overrides:
        config_data = _deep_merge(config_data, env_overrides)

    return Config(**config_data)


def create_default_config(config_path: Path) -> None:
    """
    Create a default configuration file.

    Args:
        config_path: Path where to create the configuration file
    """
    default_config = {
        "version": "1.0.0",
        "store": {
            "backend": "mongodb",
            "mongo_uri": "${MONGO_URI}",
            "db_name": "${DB_NAME}",
            "collection": "posts",
            "server_selection_timeout_ms": 5000,
        },
        "server": {
            "name": "llm-cms-server",
            "log_level": "INFO",
        },
        "tools": {
            "create_post": {"enabled": True},
            "list_posts": {"enabled": True, "max_results": 100, "default_limit": 10},
            "get_post": {"enabled": True},
            "update_post": {"enabled": True},
            "delete_post": {"enabled": True},
        },
    }

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(default_config, f, indent=2)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
