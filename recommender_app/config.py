"""Configuration helpers for the wardrobe recommendation engine."""

from dataclasses import dataclass
from pathlib import Path
import logging
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
JUDGE_BACKENDS = ("none", "gemini", "http")

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Configuration values for the recommendation engine and its collaborators.

    Scoring knobs (threshold, caps and limits) live next to the optional
    external judge settings so a single object can be handed to the agent, the
    cache and the HTTP layer.
    """

    environment: str | None = None
    judge_backend: str = "none"
    model: str = DEFAULT_GEMINI_MODEL
    api_key: Optional[str] = None
    judge_url: Optional[str] = None
    judge_timeout_seconds: float = 5.0
    min_score: float = 0.5
    products_per_outfit: int = 2
    complements_per_product: int = 3
    outfit_limit: int = 6
    product_limit: int = 8
    cache_ttl_minutes: float = 5.0
    cache_max_entries: int = 256

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets such as
        the Gemini key can be injected by the runtime.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("ENGINE_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        defaults = cls()
        judge_backend = str(get_value("judge_backend", "none") or "none").strip().lower()
        if judge_backend not in JUDGE_BACKENDS:
            logger.warning("Unknown judge backend '%s', disabling external judge", judge_backend)
            judge_backend = "none"

        return cls(
            environment=env_name,
            judge_backend=judge_backend,
            model=str(get_value("gemini_model", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL),
            api_key=get_value("gemini_api_key"),
            judge_url=get_value("judge_url"),
            judge_timeout_seconds=_as_float(get_value("judge_timeout_seconds"), defaults.judge_timeout_seconds),
            min_score=_as_float(get_value("min_score"), defaults.min_score),
            products_per_outfit=_as_int(get_value("products_per_outfit"), defaults.products_per_outfit),
            complements_per_product=_as_int(
                get_value("complements_per_product"), defaults.complements_per_product
            ),
            outfit_limit=_as_int(get_value("outfit_limit"), defaults.outfit_limit),
            product_limit=_as_int(get_value("product_limit"), defaults.product_limit),
            cache_ttl_minutes=_as_float(get_value("cache_ttl_minutes"), defaults.cache_ttl_minutes),
            cache_max_entries=_as_int(get_value("cache_max_entries"), defaults.cache_max_entries),
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


def _as_float(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric config value %r", value)
        return default
    return parsed if parsed >= 0 else default


def _as_int(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer config value %r", value)
        return default
    return parsed if parsed > 0 else default


__all__ = ["EngineConfig", "DEFAULT_GEMINI_MODEL", "JUDGE_BACKENDS"]
