"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vidpipe.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _resolve_repo_path(value: str) -> str:
    raw = str(value or "").strip()
    if not raw:
        return raw
    p = Path(raw).expanduser()
    if p.is_absolute():
        return str(p)
    return str((_REPO_ROOT / p).resolve())


class StorageConfig(BaseSettings):
    """Staging directories. Empty values fall back to `<data_dir>/...`."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uploads_dir: str | None = None
    outputs_dir: str | None = None
    ephemeral_dir: str | None = None


class EncoderConfig(BaseSettings):
    """External encoder (ffmpeg) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ENCODER_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "ffmpeg"
    ffmpeg_bin: str = "ffmpeg"
    timeout_s: float = Field(default=3600.0, gt=0, description="Hard limit for one encode.")
    max_concurrency: int = Field(default=4, ge=1)
    output_extension: str = ".mp4"

    @field_validator("output_extension")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        ext = str(value or "").strip()
        if not ext.startswith(".") or len(ext) < 2:
            raise ConfigurationError(f"ENCODER_OUTPUT_EXTENSION must start with '.': {value!r}")
        return ext


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s [%(job_id)s]: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    data_dir: str = "./data"
    log_dir: str = "./logs"
    upload_max_bytes: int = Field(default=10 * 1024 * 1024 * 1024, ge=1)

    # Database
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_db: str = "vidpipe"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    db_pool_min_size: int = Field(default=1, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)

    storage: StorageConfig = StorageConfig()
    encoder: EncoderConfig = EncoderConfig()
    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        # Apps run with a different CWD; keep paths stable under the repo root.
        self.data_dir = _resolve_repo_path(self.data_dir)
        self.log_dir = _resolve_repo_path(self.log_dir)
        return self

    @property
    def uploads_dir(self) -> str:
        return _resolve_repo_path(self.storage.uploads_dir or str(Path(self.data_dir) / "uploads"))

    @property
    def outputs_dir(self) -> str:
        return _resolve_repo_path(self.storage.outputs_dir or str(Path(self.data_dir) / "videos"))

    @property
    def ephemeral_dir(self) -> str:
        return _resolve_repo_path(self.storage.ephemeral_dir or str(Path(self.data_dir) / "temp"))

    @property
    def database_url(self) -> str:
        return f"postgresql://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
