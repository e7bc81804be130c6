"""
Base configuration for the MCP server.

Uses Pydantic Settings for environment-based configuration.
Each server module extends BaseServerSettings with its own prefix.
"""

from pydantic_settings import BaseSettings


class BaseServerSettings(BaseSettings):
    """Base settings shared by every MCP server in this project."""

    server_name: str = "base"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
