# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Serializer configuration model.

Defines the Pydantic model driving a batch serialization run. Default
variable lists are keyed by an explicit file-category tag instead of being
guessed from the input filename.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

# Standard ConfigDict for all config models
FROZEN_CONFIG = ConfigDict(extra='allow', populate_by_name=True, frozen=True)

DEFAULT_VARIABLE_SETS: Dict[str, List[str]] = {
    'A3dyn': ['U', 'V', 'OMEGA'],
    'A3cld': ['QI', 'QL'],
    'I3': ['PS', 'QV', 'T'],
}


class SerializerConfig(BaseModel):
    """Settings for serializing the variables of one NetCDF file."""
    model_config = FROZEN_CONFIG

    variable_sets: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_VARIABLE_SETS.items()},
        alias='VARIABLE_SETS',
        description='File category tag -> variables serialized for that category'
    )
    output_pattern: Optional[str] = Field(
        default=None,
        alias='OUTPUT_PATTERN',
        description='Output path pattern containing a {name} placeholder'
    )
    time_variable: str = Field(
        default='time',
        alias='TIME_VARIABLE',
        description='Name of the time coordinate variable'
    )
    lat_variable: str = Field(default='lat', alias='LAT_VARIABLE')
    lon_variable: str = Field(default='lon', alias='LON_VARIABLE')
    level_dimension: str = Field(
        default='lev',
        alias='LEVEL_DIMENSION',
        description='Name of the vertical level dimension, if the dataset has one'
    )
    write_coordinates: bool = Field(
        default=True,
        alias='WRITE_COORDINATES',
        description='Write LAT1D/LON1D variable records alongside the variables'
    )
    write_dimension_file: bool = Field(
        default=True,
        alias='WRITE_DIMENSION_FILE',
        description='Write the shared DIMS dimension file'
    )
    verify: bool = Field(
        default=False,
        alias='VERIFY',
        description='Read every record back and compare it against the source dataset'
    )
    mask_and_scale: bool = Field(
        default=False,
        alias='MASK_AND_SCALE',
        description='Apply CF masking/scaling when reading; off keeps raw stored values'
    )

    @field_validator('output_pattern')
    @classmethod
    def _pattern_has_placeholder(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and '{name}' not in value:
            raise ValueError("output_pattern must contain a '{name}' placeholder")
        return value

    def variables_for(self, category: str) -> List[str]:
        """Return the variable list configured for a file category tag."""
        try:
            return list(self.variable_sets[category])
        except KeyError:
            known = ', '.join(sorted(self.variable_sets)) or '<none>'
            raise ConfigurationError(
                f"Unknown variable category '{category}' (configured: {known})"
            ) from None

    @classmethod
    def from_file(
        cls,
        path: Path,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> 'SerializerConfig':
        """Load a configuration from YAML, applying optional overrides.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Failed to load configuration {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration {path} must be a mapping")

        data = cls._normalize_keys(data)
        data.update(cls._normalize_keys(overrides or {}))
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SerializerConfig':
        try:
            return cls(**cls._normalize_keys(data))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid serializer configuration: {exc}") from exc

    @classmethod
    def _normalize_keys(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Map field names onto their uppercase aliases so later keys win."""
        aliases = {
            name: info.alias for name, info in cls.model_fields.items() if info.alias
        }
        return {aliases.get(key, key): value for key, value in data.items()}
