"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Every field has a development default so the server boots without a `.env`.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from boxcloud.database.config.config import settings

upload_dir = settings.UPLOAD_DIR
max_size = settings.MAX_FILE_SIZE

Security
--------
- Never commit secrets or the `.env` file to source control.
- `SECRET_KEY` must be overridden in production; the default only exists for
  local development and tests.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PORT: int = Field(3000, description="Port the HTTP server listens on.")
    ENVIRONMENT: str = Field("development", description="Runtime environment (`development`, `production`, `test`).")
    DB_PATH: str = Field("./database.sqlite", description="Path of the SQLite database file.")
    UPLOAD_DIR: str = Field("./uploads", description="Directory where uploaded PDF files are stored.")
    MAX_FILE_SIZE: int = Field(50 * 1024 * 1024, description="Maximum size in bytes of a single uploaded file.")
    MAX_FILES_PER_UPLOAD: int = Field(10, description="Maximum number of files accepted by one upload request.")
    SECRET_KEY: str = Field("change-me-in-production", description="Secret key for signing access tokens.")
    ALGORITHM: str = Field("HS256", description="JWT signing algorithm.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(7 * 24 * 60, description="Duration (in minutes) before access tokens expire.")
    BCRYPT_ROUNDS: int = Field(12, description="bcrypt work factor used when hashing passwords.")
    RATE_LIMIT_WINDOW_MS: int = Field(15 * 60 * 1000, description="Length of the rate-limit window in milliseconds.")
    RATE_LIMIT_MAX_REQUESTS: int = Field(100, description="Requests allowed per client address within one window.")
    FRONTEND_URL: str = Field("http://localhost:5173", description="Origin allowed to call the API from a browser (CORS).")
    PUBLIC_BASE_URL: str = Field("http://localhost:5173", description="Base URL used to build public box links and QR codes.")
    LICENSE_CODES_FILE: Optional[str] = Field(None, description="Optional JSON file of license codes imported at startup.")
    LOG_LEVEL: Optional[str] = Field(None, description="Explicit log level override (e.g. `DEBUG`).")
    LOG_FORMAT: Optional[str] = Field(None, description="`plain` or `json`; defaults to json in production.")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in {"production", "prod"}


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the environment / .env file"""
