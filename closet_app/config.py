"""Configuration helpers for the closet engine."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_DATA_DIR = "data"


def _as_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value not in (None, "") else default
    except ValueError:
        return default


def _as_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value not in (None, "") else default
    except ValueError:
        return default


@dataclass
class EngineConfig:
    """Configuration values for the closet engine and its local stores.

    Paths left as ``None`` resolve under ``data_dir``.
    """

    data_dir: str = DEFAULT_DATA_DIR
    catalog_db_path: Optional[str] = None
    outfit_store_path: Optional[str] = None
    feedback_store_backend: str = "json"
    feedback_store_path: Optional[str] = None
    default_max_results: int = 6
    per_slot_limit: int = 8
    max_candidates: int = 1500
    sampling_seed: int = 1729
    near_repeat_threshold: float = 0.7
    log_level: str = "INFO"
    log_format: str = "json"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables or an environment file.

        Environment specific files live in ``config/environments/<env>.yaml`` by
        default and are merged with environment variables, which take
        precedence.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
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
            env_key = f"CLOSET_{key.upper()}"
            return os.getenv(env_key, yaml_config.get(key, default))

        return cls(
            data_dir=str(get_value("data_dir", DEFAULT_DATA_DIR) or DEFAULT_DATA_DIR),
            catalog_db_path=get_value("catalog_db_path"),
            outfit_store_path=get_value("outfit_store_path"),
            feedback_store_backend=str(get_value("feedback_store_backend", "json") or "json"),
            feedback_store_path=get_value("feedback_store_path"),
            default_max_results=_as_int(get_value("default_max_results"), 6),
            per_slot_limit=_as_int(get_value("per_slot_limit"), 8),
            max_candidates=_as_int(get_value("max_candidates"), 1500),
            sampling_seed=_as_int(get_value("sampling_seed"), 1729),
            near_repeat_threshold=_as_float(get_value("near_repeat_threshold"), 0.7),
            log_level=str(os.getenv("LOG_LEVEL", yaml_config.get("log_level", "INFO"))),
            log_format=str(os.getenv("LOG_FORMAT", yaml_config.get("log_format", "json"))),
            environment=env_name,
        )

    def resolve(self, explicit: Optional[str], filename: str) -> Path:
        """Return ``explicit`` or ``filename`` under the data directory."""

        return Path(explicit) if explicit else Path(self.data_dir) / filename

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
