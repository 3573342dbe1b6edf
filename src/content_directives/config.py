"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class DirectivesConfig:
    """Directive and sort policy settings."""
    old_item_days: int = 3


@dataclass
class ThreadsConfig:
    """Comment thread settings."""
    comment_depth_limit: int = 6


@dataclass
class JobQueueConfig:
    """Job queue endpoint settings."""
    url: Optional[str] = None
    timeout: float = 30.0


@dataclass
class StorageConfig:
    """Content store settings."""
    content_dir: Path = Path("content")


@dataclass
class Settings:
    """Application settings."""

    # Secrets (from environment only)
    job_queue_token: Optional[str] = None

    # Config sections
    directives: DirectivesConfig = field(default_factory=DirectivesConfig)
    threads: ThreadsConfig = field(default_factory=ThreadsConfig)
    job_queue: JobQueueConfig = field(default_factory=JobQueueConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @property
    def old_item_days(self) -> int:
        return self.directives.old_item_days

    @property
    def comment_depth_limit(self) -> int:
        return self.threads.comment_depth_limit

    @property
    def job_queue_url(self) -> Optional[str]:
        return self.job_queue.url

    @property
    def content_dir(self) -> Path:
        return self.storage.content_dir


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(job_queue_token=os.getenv("JOB_QUEUE_TOKEN"))

    if "directives" in config:
        for key, value in config["directives"].items():
            setattr(settings.directives, key, value)

    if "threads" in config:
        for key, value in config["threads"].items():
            setattr(settings.threads, key, value)

    if "job_queue" in config:
        for key, value in config["job_queue"].items():
            setattr(settings.job_queue, key, value)

    if "storage" in config:
        for key, value in config["storage"].items():
            setattr(settings.storage, key, Path(value))

    # Environment wins over the file for the endpoint
    job_queue_url = os.getenv("JOB_QUEUE_URL")
    if job_queue_url:
        settings.job_queue.url = job_queue_url

    return settings
