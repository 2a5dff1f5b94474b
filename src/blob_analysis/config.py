"""
Detection settings.

Settings can be built in code or read from the ``blob_detection`` section
of a YAML file:

    blob_detection:
      threshold: 200
      min_area: 4.0
      region_size: 48
      copy_crops: false
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .cropping import DEFAULT_REGION_SIZE
from .exceptions import InvalidArgument
from .region_analysis import DEFAULT_MIN_AREA

logger = logging.getLogger(__name__)

CONFIG_SECTION = 'blob_detection'
DEFAULT_THRESHOLD = 127


@dataclass(frozen=True)
class DetectionConfig:
    """Parameters for one detection run."""

    threshold: int = DEFAULT_THRESHOLD
    min_area: float = DEFAULT_MIN_AREA
    region_size: int = DEFAULT_REGION_SIZE
    copy_crops: bool = False

    def __post_init__(self):
        if self.region_size <= 0:
            raise InvalidArgument(
                f"region_size must be > 0, got {self.region_size}",
                name='region_size',
                value=self.region_size
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DetectionConfig':
        """
        Build a config from a plain dictionary.

        Unknown keys are ignored; missing keys keep their defaults.
        Integer fields accept integral numbers or numeric strings and
        ``copy_crops`` only a real boolean, so YAML strings such as
        ``"no"`` are rejected rather than read as true.

        Raises:
            InvalidArgument: If a value has the wrong type or domain
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {sorted(unknown)}")

        values = {key: value for key, value in data.items() if key in known}

        if 'threshold' in values:
            values['threshold'] = _as_int('threshold', values['threshold'])
        if 'region_size' in values:
            values['region_size'] = _as_int('region_size', values['region_size'])
        if 'min_area' in values:
            min_area = values['min_area']
            if isinstance(min_area, bool):
                raise InvalidArgument(
                    f"min_area must be a number, got {min_area!r}",
                    name='min_area',
                    value=min_area
                )
            try:
                values['min_area'] = float(min_area)
            except (TypeError, ValueError) as e:
                raise InvalidArgument(
                    f"Invalid config value for min_area: {e}",
                    name='min_area',
                    value=min_area
                ) from e
        if 'copy_crops' in values and not isinstance(values['copy_crops'], bool):
            raise InvalidArgument(
                f"copy_crops must be true or false, got {values['copy_crops']!r}",
                name='copy_crops',
                value=values['copy_crops']
            )

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _as_int(name: str, value: Any) -> int:
    """Convert an integer config value, rejecting bools and fractions."""
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}", name=name, value=value)

    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgument(f"{name} must be an integer, got {value!r}", name=name, value=value)
        return int(value)

    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Invalid config value for {name}: {e}", name=name, value=value) from e


def load_config(config_path: Union[str, Path]) -> DetectionConfig:
    """
    Load detection settings from a YAML file.

    Reads the ``blob_detection`` section if present, otherwise the top
    level mapping. A missing file yields the defaults.

    Args:
        config_path: Path to the YAML file

    Returns:
        DetectionConfig with file values applied over the defaults

    Raises:
        InvalidArgument: If the file is not valid YAML or holds invalid values
    """
    path = Path(config_path)

    if not path.exists():
        logger.info(f"Config file {path} does not exist, using defaults")
        return DetectionConfig()

    try:
        with path.open('r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse config file {path}: {e}")
        raise InvalidArgument(f"Malformed config file {path}: {e}") from e

    if loaded is None:
        loaded = {}

    if not isinstance(loaded, dict):
        raise InvalidArgument(f"Config file {path} must contain a mapping")

    section = loaded.get(CONFIG_SECTION, loaded)
    if not isinstance(section, dict):
        raise InvalidArgument(f"'{CONFIG_SECTION}' section in {path} must be a mapping")

    config = DetectionConfig.from_dict(section)
    logger.info(f"Loaded detection config from {path}: {config.to_dict()}")

    return config
