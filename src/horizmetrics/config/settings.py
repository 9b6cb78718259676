#!/usr/bin/env python3
"""
Configuration settings using Pydantic for environment variable loading
"""

import os
from datetime import timedelta
from typing import Optional, Dict, Any

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
load_dotenv()


class GatherSettings(BaseSettings):
    """Readiness windows and parallelism used while gathering"""
    cpu_initialization_period: int = 300
    initial_readiness_delay: int = 30
    max_workers: int = 4

    model_config = SettingsConfigDict(env_prefix="HORIZMETRICS_", extra="ignore")

    @property
    def cpu_initialization_timedelta(self) -> timedelta:
        return timedelta(seconds=self.cpu_initialization_period)

    @property
    def initial_readiness_timedelta(self) -> timedelta:
        return timedelta(seconds=self.initial_readiness_delay)


class EvaluateSettings(BaseSettings):
    """Policy applied when combining metric evaluations"""
    # 0.0 disables the tolerance check
    tolerance: float = 0.0
    fail_fast: bool = True

    model_config = SettingsConfigDict(env_prefix="HORIZMETRICS_", extra="ignore")


class KubernetesSettings(BaseSettings):
    """Kubernetes configuration settings"""
    in_cluster: bool = False
    kubeconfig_path: Optional[str] = os.getenv("KUBECONFIG_PATH")
    request_timeout: Optional[float] = None

    model_config = SettingsConfigDict(env_prefix="KUBERNETES_", extra="ignore")


class LoggingSettings(BaseSettings):
    """Package logger level and optional log file"""
    level: str = "INFO"
    file: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="HORIZMETRICS_LOG_", extra="ignore")


class Settings(BaseSettings):
    """All horizmetrics settings, grouped by concern"""
    gather: GatherSettings = Field(default_factory=GatherSettings)
    evaluate: EvaluateSettings = Field(default_factory=EvaluateSettings)
    kubernetes: KubernetesSettings = Field(default_factory=KubernetesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def get_config_dict(self) -> Dict[str, Any]:
        """Effective configuration as plain nested dicts"""
        return {
            section: getattr(self, section).model_dump()
            for section in ("gather", "evaluate", "kubernetes", "logging")
        }

    @classmethod
    def load_from_yaml_with_env_override(cls, yaml_path: str) -> "Settings":
        """
        Build settings from a YAML file with one mapping per section

        $VAR and ${VAR} references in the file are expanded from the environment;
        unknown references are left as written. A missing file gives the defaults.
        """
        sections: Dict[str, Any] = {}
        if os.path.exists(yaml_path):
            with open(yaml_path, 'r') as f:
                sections = yaml.safe_load(os.path.expandvars(f.read())) or {}

        return cls(
            gather=GatherSettings(**sections.get("gather", {})),
            evaluate=EvaluateSettings(**sections.get("evaluate", {})),
            kubernetes=KubernetesSettings(**sections.get("kubernetes", {})),
            logging=LoggingSettings(**sections.get("logging", {})),
        )

