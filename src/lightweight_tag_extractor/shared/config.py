"""Configuration classes for tag extraction.

This module provides configuration objects for the scanner, the attribute
parser and the global logging behaviour, plus named presets.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
COMPONENT_FIELDS = ["scan", "attributes", "global_"]


@dataclass(frozen=True)
class ScanConfig:
    """Configuration for the balanced tag scanner.

    ``balance_fast_path`` only affects scans that take the fast path; with
    ``enable_fast_path`` off every scan is balanced and the flag is ignored.
    """

    # Applies to the fast path and the filtered path alike
    case_sensitive: bool = False
    enable_fast_path: bool = True
    # Re-balance fast-path matches that contain a nested same-type tag
    balance_fast_path: bool = True
    default_limit: int = 0

    def __post_init__(self) -> None:
        """Validate scan configuration."""
        if self.default_limit < 0:
            raise ValueError("default_limit must be >= 0")


@dataclass(frozen=True)
class AttributeConfig:
    """Configuration for attribute map parsing."""

    allow_single_quotes: bool = False
    allow_unquoted: bool = False

    @property
    def double_quotes_only(self) -> bool:
        """Check if only ``name="value"`` syntax is recognised."""
        return not (self.allow_single_quotes or self.allow_unquoted)


@dataclass(frozen=True)
class GlobalConfig:
    """Global settings that apply across all components."""

    logging_level: str = "INFO"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ExtractorConfig:
    """Complete configuration for tag extraction.

    Immutable, so a single instance can be shared by extractors running in
    different threads.
    """

    scan: ScanConfig = field(default_factory=ScanConfig)
    attributes: AttributeConfig = field(default_factory=AttributeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete extractor configuration."""
        try:
            self.scan.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ExtractorConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; component fields use the
                ``component__field`` notation

        Returns:
            New ExtractorConfig instance with overrides applied

        Example:
            >>> config = ExtractorConfig()
            >>> strict = config.override(scan__case_sensitive=True)
            >>> strict.scan.case_sensitive
            True
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in COMPONENT_FIELDS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=COMPONENT_FIELDS
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in COMPONENT_FIELDS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides:
                try:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=field_name) from e
            else:
                new_fields[field_name] = current_config

        for key, value in nested_overrides.items():
            if key not in COMPONENT_FIELDS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractorConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface
        instead of being silently ignored.
        """
        components = {
            "scan": ScanConfig,
            "attributes": AttributeConfig,
            "global_": GlobalConfig,
        }
        field_values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in components:
                try:
                    field_values[key] = components[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in cls.__dataclass_fields__:
                field_values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}",
                    field_name=key,
                    suggestions=sorted(cls.__dataclass_fields__)
                )
        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "ExtractorConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def balanced(cls) -> "ExtractorConfig":
        """Default preset: case-insensitive tags, balanced fast path."""
        return cls(name="balanced")

    @classmethod
    def strict(cls) -> "ExtractorConfig":
        """Create preset that matches tag names exactly and always balances."""
        return cls(
            scan=ScanConfig(
                case_sensitive=True,
                enable_fast_path=False,
                balance_fast_path=False
            ),
            name="strict",
            description="Case-sensitive tag names, nesting-aware scan on every call"
        )

    @classmethod
    def lenient(cls) -> "ExtractorConfig":
        """Create preset that also parses single-quoted and unquoted attributes."""
        return cls(
            attributes=AttributeConfig(allow_single_quotes=True, allow_unquoted=True),
            name="lenient",
            description="Accepts single-quoted and unquoted attribute values"
        )

    @classmethod
    def flat(cls) -> "ExtractorConfig":
        """Create preset whose unfiltered scans never account for nesting."""
        return cls(
            scan=ScanConfig(balance_fast_path=False),
            name="flat",
            description="Unfiltered scans stop at the first closing tag"
        )

    @classmethod
    def preset(cls, name: str) -> "ExtractorConfig":
        """Look up a preset by name."""
        presets = {
            "balanced": cls.balanced,
            "strict": cls.strict,
            "lenient": cls.lenient,
            "flat": cls.flat,
        }
        if name not in presets:
            raise ConfigValidationError(
                f"Unknown preset: {name}",
                suggestions=sorted(presets)
            )
        return presets[name]()
