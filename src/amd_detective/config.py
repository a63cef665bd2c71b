"""
Configuration management for amd-detective.

Settings come from dataclass defaults, an optional project or user config
file (JSON, YAML or TOML), and environment variable overrides, in that
order.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
from rich.console import Console

try:
    import yaml

    HAS_YAML = True
except ImportError:
    HAS_YAML = False

console = Console(stderr=True)

VALID_OUTPUT_FORMATS = ("console", "json")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ExtractConfig:
    """Dependency extraction settings."""

    skip_lazy_loaded: bool = False


@dataclass
class SecurityConfig:
    """Limits applied when reading source files."""

    max_file_size_mb: int = 10
    allowed_file_extensions: List[str] = field(
        default_factory=lambda: [".js", ".mjs", ".cjs"]
    )

    @property
    def max_file_size_bytes(self) -> int:
        """Convert MB to bytes for internal use."""
        return self.max_file_size_mb * 1024 * 1024


@dataclass
class OutputConfig:
    """CLI output settings."""

    output_format: str = "console"
    quiet: bool = False


@dataclass
class LoggingConfig:
    """Logging settings."""

    log_level: str = "WARNING"
    enable_json: bool = True


@dataclass
class DetectiveConfig:
    """Main configuration containing all subsections."""

    extract: ExtractConfig = field(default_factory=ExtractConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Global configuration instance
_global_config: Optional[DetectiveConfig] = None

CONFIG_SECTIONS = ("extract", "security", "output", "logging")


def validate_config_values(config: DetectiveConfig) -> List[str]:
    """
    Validate configuration values and return any errors.

    Args:
        config: Configuration to validate

    Returns:
        List[str]: List of validation errors (empty if valid)
    """
    errors = []

    if not isinstance(config.extract.skip_lazy_loaded, bool):
        errors.append("extract.skip_lazy_loaded must be a boolean")

    max_file_size = config.security.max_file_size_mb
    if isinstance(max_file_size, bool) or not isinstance(max_file_size, int):
        errors.append("security.max_file_size_mb must be an integer")
    elif max_file_size <= 0:
        errors.append("security.max_file_size_mb must be positive")

    extensions = config.security.allowed_file_extensions
    if not isinstance(extensions, list):
        errors.append("security.allowed_file_extensions must be a list")
    elif not extensions:
        errors.append("security.allowed_file_extensions must not be empty")
    else:
        for ext in extensions:
            if not isinstance(ext, str) or not ext.startswith("."):
                errors.append(
                    f"security.allowed_file_extensions entry {ext!r} must start with '.'"
                )

    if config.output.output_format not in VALID_OUTPUT_FORMATS:
        errors.append(
            f"output.output_format must be one of: {', '.join(VALID_OUTPUT_FORMATS)}"
        )

    if not isinstance(config.output.quiet, bool):
        errors.append("output.quiet must be a boolean")

    if not isinstance(config.logging.enable_json, bool):
        errors.append("logging.enable_json must be a boolean")

    if str(config.logging.log_level).upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"logging.log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    return errors


def load_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    """Load config from a JSON, YAML or TOML file."""
    if not config_path.exists():
        return None

    suffix = config_path.suffix.lower()
    try:
        with open(config_path, encoding="utf-8") as f:
            if suffix in [".yaml", ".yml"]:
                if HAS_YAML:
                    return yaml.safe_load(f)
                console.print(
                    "⚠️  PyYAML not installed, skipping YAML config", style="yellow"
                )
                return None
            if suffix == ".toml":
                return toml.load(f)
            if suffix == ".json":
                return json.load(f)
    except Exception as e:
        console.print(
            f"⚠️  Error loading config from {config_path}: {e}", style="yellow"
        )

    return None


def find_config_file() -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        Path.cwd() / ".amd-detective.json",
        Path.cwd() / ".amd-detective.yaml",
        Path.cwd() / ".amd-detective.yml",
        Path.cwd() / ".amd-detective.toml",
        Path.home() / ".config" / "amd-detective" / "config.json",
        Path.home() / ".config" / "amd-detective" / "config.toml",
    ]

    for location in locations:
        if location.exists():
            return location

    return None


def load_environment_overrides(config: DetectiveConfig) -> None:
    """Load environment variable overrides."""

    def get_env_bool(key: str, default: bool = False) -> bool:
        value = os.environ.get(key, "").lower()
        return value in ["true", "1", "yes", "on"] if value else default

    def get_env_int(key: str, default: Optional[int] = None) -> Optional[int]:
        try:
            return int(os.environ[key]) if key in os.environ else default
        except ValueError:
            console.print(f"⚠️  Invalid integer value for {key}, using default", style="yellow")
            return default

    config.extract.skip_lazy_loaded = get_env_bool(
        "AMD_DETECTIVE_SKIP_LAZY_LOADED", config.extract.skip_lazy_loaded
    )

    if max_file_size := get_env_int("AMD_DETECTIVE_MAX_FILE_SIZE_MB"):
        config.security.max_file_size_mb = max_file_size

    if output_format := os.environ.get("AMD_DETECTIVE_OUTPUT_FORMAT"):
        config.output.output_format = output_format.lower()

    if log_level := os.environ.get("AMD_DETECTIVE_LOG_LEVEL"):
        config.logging.log_level = log_level.upper()


def apply_config_section(
    config: Any, section_data: Dict[str, Any], section_name: str
) -> None:
    """Apply configuration from dictionary to config section."""
    for key, value in section_data.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            console.print(
                f"⚠️  Unknown config key in {section_name}: {key}", style="yellow"
            )


def apply_config_data(config: DetectiveConfig, data: Dict[str, Any]) -> None:
    """Apply every known section of a loaded config file."""
    for section in CONFIG_SECTIONS:
        if isinstance(data.get(section), dict):
            apply_config_section(getattr(config, section), data[section], section)

    # Top-level shorthand
    if "skip_lazy_loaded" in data:
        config.extract.skip_lazy_loaded = data["skip_lazy_loaded"]


def load_config(config_path: Optional[Path] = None) -> DetectiveConfig:
    """Load configuration from file and environment."""
    global _global_config

    if _global_config is not None and config_path is None:
        return _global_config

    config = DetectiveConfig()

    config_file = config_path or find_config_file()
    if config_file:
        file_config = load_config_file(config_file)
        if file_config:
            apply_config_data(config, file_config)

    load_environment_overrides(config)

    validation_errors = validate_config_values(config)
    if validation_errors:
        console.print("⚠️  Configuration validation errors:", style="red")
        for error in validation_errors:
            console.print(f"  • {error}", style="red")
        console.print("Using default values for invalid settings.", style="yellow")
        _restore_invalid_defaults(config, validation_errors)

    _global_config = config
    return config


def _restore_invalid_defaults(config: DetectiveConfig, errors: List[str]) -> None:
    defaults = DetectiveConfig()
    for error in errors:
        section, _, rest = error.partition(".")
        key = rest.split(" ", 1)[0]
        if section in CONFIG_SECTIONS and hasattr(getattr(defaults, section), key):
            setattr(
                getattr(config, section), key, getattr(getattr(defaults, section), key)
            )


def get_config() -> DetectiveConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _global_config
    _global_config = None


def create_sample_config() -> str:
    """Generate a sample JSON configuration."""
    return json.dumps(DetectiveConfig().to_dict(), indent=2)
