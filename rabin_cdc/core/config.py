"""
Configuration for the content-defined chunkers.

Configuration can be built in code, from a plain dictionary, or loaded from
a YAML or JSON file:

    config = load_config("cdc.yaml")
    chunker = RabinChunker(config)

A YAML file looks like:

    window_size: 48
    min_chunk_size: 2048
    max_chunk_size: 8192
    boundary_mask: 0x1FFF
    polynomial: 0x3
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from rabin_cdc.core.fingerprint import CHUNK_MASK, POLY, WINDOW_SIZE

logger = logging.getLogger(__name__)

MIN_CHUNK = 2048
MAX_CHUNK = 8192


@dataclass
class CDCConfig:
    """Configuration for Rabin-style content-defined chunking."""
    window_size: int = WINDOW_SIZE        # Sliding window size
    min_chunk_size: int = MIN_CHUNK       # 2KB minimum
    max_chunk_size: int = MAX_CHUNK       # 8KB maximum
    boundary_mask: int = CHUNK_MASK       # 13-bit mask (8KB avg)
    polynomial: int = POLY                # Lookup table polynomial
    enable_statistics: bool = True

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.window_size <= 0:
            raise ValueError("window_size must be positive")
        if self.min_chunk_size <= 0:
            raise ValueError("min_chunk_size must be positive")
        if self.max_chunk_size < self.min_chunk_size:
            raise ValueError("max_chunk_size must not be smaller than min_chunk_size")
        if self.window_size > self.min_chunk_size:
            # The first cut can only happen once the window is full
            raise ValueError("window_size must not be larger than min_chunk_size")
        if self.boundary_mask <= 0:
            raise ValueError("boundary_mask must be positive")
        if self.polynomial <= 0:
            raise ValueError("polynomial must be positive")

    @property
    def expected_chunk_size(self) -> int:
        """Average chunk size implied by the mask, before min/max clamping."""
        return 1 << bin(self.boundary_mask).count("1")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CDCConfig":
        """Create a config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        return cls(**{k: _coerce_int(v) for k, v in data.items() if k in known})


def _coerce_int(value: Any) -> Any:
    # JSON has no hex literals, so masks may arrive as "0x1FFF"
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            return value
    return value


def load_config(config_path: Union[str, Path]) -> CDCConfig:
    """
    Load a chunker configuration from a YAML or JSON file.

    A ``chunker`` section is used when present, otherwise the whole document.

    Args:
        config_path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

    Returns:
        Parsed and validated configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported or the content is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if config_path.suffix.lower() in ['.yaml', '.yml']:
                try:
                    raw_config = yaml.safe_load(f)
                except yaml.composer.ComposerError:
                    # Multi-document YAML, load the first document
                    f.seek(0)
                    raw_config = next(yaml.safe_load_all(f))
            elif config_path.suffix.lower() == '.json':
                raw_config = json.load(f)
            else:
                raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(raw_config).__name__}")

        section = raw_config.get("chunker", raw_config)
        config = CDCConfig.from_dict(section)
        logger.debug(f"Loaded configuration from {config_path}: {config.to_dict()}")
        return config

    except Exception as e:
        logger.error(f"Error loading configuration file: {e}")
        raise


def save_config(config: CDCConfig, output_path: Union[str, Path]) -> Path:
    """Write a configuration as YAML under a ``chunker`` section."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump({"chunker": config.to_dict()}, f, default_flow_style=False, sort_keys=False)
    return output_path
