"""
Configuration for treetrans runs.

Sources, later ones winning:
- Defaults below
- Environment variables (a .env file in the working directory is loaded first)
- YAML config file (optional)
- Command-line overrides

Usage:
    from treetrans.utils.config import Config

    config = Config.load("treetrans.yaml")
    config.apply_overrides(batch_size=5, reset=True)
    config.validate()
"""
import os
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_ENV_FILE = ".env"

DEFAULT_BATCH_SIZE: int = 20
DEFAULT_INTERVAL_MS: int = 10000
DEFAULT_STRATEGY: str = "walk"
STRATEGIES = ("walk", "prescan")

DEFAULT_SOURCE_LANG: str = "Dutch"
DEFAULT_TARGET_LANG: str = "English"
DEFAULT_EXTENSIONS: List[str] = [".rst"]

GEMINI_MODEL: str = "gemini-2.0-flash"
GEMINI_TEMPERATURE: float = 0.3


# =============================================================================
# ENV HELPERS
# =============================================================================

def _env_str(name: str, default: str = "") -> str:
    value = os.environ.get(name)
    return value.strip() if value is not None and value.strip() else default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as e:
        raise ConfigError(
            f"{name} must be an integer, got {raw!r}",
            config_key=name, expected_type="int", cause=e
        )


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _normalize_extensions(extensions: List[str]) -> List[str]:
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if ext and not ext.startswith("."):
            ext = "." + ext
        if ext:
            normalized.append(ext)
    return normalized


# =============================================================================
# CONFIG CLASSES
# =============================================================================

@dataclass
class PathsConfig:
    """Source and target trees."""
    source_dir: str = ""
    target_dir: str = ""
    exclude: List[str] = field(default_factory=list)  # glob patterns on entry names


@dataclass
class BatchConfig:
    """Per-run throttling."""
    size: int = DEFAULT_BATCH_SIZE
    interval_ms: int = DEFAULT_INTERVAL_MS
    strategy: str = DEFAULT_STRATEGY


@dataclass
class TranslationConfig:
    """Translation settings."""
    source_lang: str = DEFAULT_SOURCE_LANG
    target_lang: str = DEFAULT_TARGET_LANG
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    model: str = GEMINI_MODEL
    temperature: float = GEMINI_TEMPERATURE


@dataclass
class LoggingConfig:
    """Logging settings."""
    debug: bool = False
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Sensitive, environment only
    gemini_api_key: str = ""

    # Wipe checkpoint and term report before running
    reset: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Build configuration from environment variables."""
        config = cls()

        config.paths.source_dir = _env_str("SOURCE_DIR")
        config.paths.target_dir = _env_str("TARGET_DIR")
        config.paths.exclude = _env_list("EXCLUDE", [])

        config.batch.size = _env_int("BATCH_SIZE", DEFAULT_BATCH_SIZE)
        config.batch.interval_ms = _env_int("INTERVAL_TIME", DEFAULT_INTERVAL_MS)
        config.batch.strategy = _env_str("TRAVERSAL", DEFAULT_STRATEGY)

        config.translation.source_lang = _env_str("SOURCE_LANG", DEFAULT_SOURCE_LANG)
        config.translation.target_lang = _env_str("TARGET_LANG", DEFAULT_TARGET_LANG)
        config.translation.extensions = _normalize_extensions(
            _env_list("TRANSLATE_EXTENSIONS", DEFAULT_EXTENSIONS)
        )
        config.translation.model = _env_str("GEMINI_MODEL", GEMINI_MODEL)

        config.logging.debug = _env_bool("DEBUG_MODE")
        config.logging.file = _env_str("LOG_FILE") or None

        config.gemini_api_key = _env_str("GEMINI_API_KEY") or _env_str("GOOGLE_API_KEY")
        return config

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        env_file: Optional[str] = DEFAULT_ENV_FILE
    ) -> "Config":
        """
        Load configuration from environment and an optional YAML file.

        Args:
            config_path: Path to YAML config file. If None, env and defaults only.
            env_file: .env file to load into the environment (existing
                variables are not overridden). None disables it.

        Raises:
            ConfigError: YAML file missing, unreadable or ill-formed.
        """
        if env_file and Path(env_file).is_file():
            load_dotenv(env_file, override=False)

        config = cls.from_env()

        if config_path is None:
            return config

        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}", config_key="config")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config file {path}", config_key="config", cause=e)

        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {path} must contain a mapping",
                config_key="config", expected_type="mapping"
            )

        config._merge_yaml(data)
        return config

    def _merge_yaml(self, data: Dict[str, Any]) -> None:
        p = _section(data, 'paths')
        self.paths.source_dir = str(p.get('source', self.paths.source_dir) or "")
        self.paths.target_dir = str(p.get('target', self.paths.target_dir) or "")
        self.paths.exclude = list(p.get('exclude', self.paths.exclude) or [])

        b = _section(data, 'batch')
        self.batch.size = b.get('size', self.batch.size)
        self.batch.interval_ms = b.get('interval_ms', self.batch.interval_ms)
        self.batch.strategy = b.get('strategy', self.batch.strategy)

        t = _section(data, 'translation')
        self.translation.source_lang = t.get('source_lang', self.translation.source_lang)
        self.translation.target_lang = t.get('target_lang', self.translation.target_lang)
        self.translation.extensions = _normalize_extensions(
            list(t.get('extensions', self.translation.extensions) or [])
        )
        self.translation.model = t.get('model', self.translation.model)
        self.translation.temperature = t.get('temperature', self.translation.temperature)

        lg = _section(data, 'logging')
        self.logging.debug = bool(lg.get('debug', self.logging.debug))
        self.logging.file = lg.get('file', self.logging.file)

    def apply_overrides(self, **overrides: Any) -> None:
        """Apply command-line overrides. None values are ignored."""
        mapping = {
            'source_dir': (self.paths, 'source_dir'),
            'target_dir': (self.paths, 'target_dir'),
            'batch_size': (self.batch, 'size'),
            'interval_ms': (self.batch, 'interval_ms'),
            'strategy': (self.batch, 'strategy'),
            'source_lang': (self.translation, 'source_lang'),
            'target_lang': (self.translation, 'target_lang'),
            'debug': (self.logging, 'debug'),
            'log_file': (self.logging, 'file'),
        }
        for key, value in overrides.items():
            if value is None:
                continue
            if key == 'reset':
                self.reset = bool(value)
            elif key in mapping:
                section, attr = mapping[key]
                setattr(section, attr, value)
            else:
                raise ConfigError(f"Unknown override: {key}", config_key=key)

    def validate(self) -> None:
        """
        Check required paths and value ranges.

        Raises:
            ConfigError: First invalid value found.
        """
        if not self.paths.source_dir:
            raise ConfigError("Source directory not configured (SOURCE_DIR)", config_key="source_dir")
        if not self.paths.target_dir:
            raise ConfigError("Target directory not configured (TARGET_DIR)", config_key="target_dir")

        if isinstance(self.batch.size, bool) or not isinstance(self.batch.size, int) or self.batch.size < 1:
            raise ConfigError(
                f"Batch size must be a positive integer, got {self.batch.size!r}",
                config_key="batch_size", expected_type="int > 0"
            )
        if isinstance(self.batch.interval_ms, bool) or not isinstance(self.batch.interval_ms, int) \
                or self.batch.interval_ms < 0:
            raise ConfigError(
                f"Interval must be a non-negative integer (ms), got {self.batch.interval_ms!r}",
                config_key="interval_ms", expected_type="int >= 0"
            )
        if self.batch.strategy not in STRATEGIES:
            raise ConfigError(
                f"Unknown traversal strategy {self.batch.strategy!r}",
                config_key="strategy", details={"choices": list(STRATEGIES)}
            )
        if not self.translation.extensions:
            raise ConfigError("No translatable extensions configured", config_key="extensions")

    def describe(self) -> Dict[str, Any]:
        """Settings for the startup log line, API key masked."""
        return {
            "source_dir": self.paths.source_dir,
            "target_dir": self.paths.target_dir,
            "exclude": self.paths.exclude,
            "batch_size": self.batch.size,
            "interval_ms": self.batch.interval_ms,
            "strategy": self.batch.strategy,
            "source_lang": self.translation.source_lang,
            "target_lang": self.translation.target_lang,
            "extensions": self.translation.extensions,
            "model": self.translation.model,
            "gemini_api_key": "***" if self.gemini_api_key else "(not set)",
            "reset": self.reset,
        }


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(
            f"Config section '{name}' must be a mapping",
            config_key=name, expected_type="mapping"
        )
    return value
