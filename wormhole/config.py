"""
Configuration for the wormhole similarity engine.

Defines the tunable constants of the engine (dimensionality, admission
threshold, stability curve, harmonic ratios) and their YAML/environment
loading.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_HARMONIC_RATIOS = [1.0, 2.0, 0.5, 1.5, 0.667, 1.333]  # unison, octave, fifth, fourth


@dataclass
class WormholeConfig:
    """
    Configuration for wormhole discovery.

    Defaults reproduce the reference metric constants; only change them
    when experimenting with a different similarity landscape.
    """

    # Length of every stored feature vector
    dimensionality: int = 10

    # Pairs are admitted as connections only above this cosine similarity
    admission_threshold: float = 0.7

    # Logistic stability curve
    stability_steepness: float = 10.0
    stability_midpoint: float = 0.8

    # Harmonic resonance
    base_frequency: float = 432.0
    harmonic_ratios: List[float] = field(default_factory=lambda: list(DEFAULT_HARMONIC_RATIOS))

    # Query defaults
    neighbor_count: int = 5
    min_stability: float = 0.8
    min_resonance: float = 0.7

    # Number of eigenvalues the built-in fingerprinter keeps
    fingerprint_top_k: int = 10

    def __post_init__(self):
        """Validate configuration parameters."""
        if int(self.dimensionality) != self.dimensionality or self.dimensionality <= 0:
            raise ValueError(f"dimensionality must be a positive integer, got {self.dimensionality}")
        self.dimensionality = int(self.dimensionality)

        if not (-1.0 <= self.admission_threshold <= 1.0):
            raise ValueError(
                f"admission_threshold must be between -1 and 1, got {self.admission_threshold}"
            )

        if self.stability_steepness <= 0:
            raise ValueError(f"stability_steepness must be positive, got {self.stability_steepness}")

        if self.base_frequency <= 0:
            raise ValueError(f"base_frequency must be positive, got {self.base_frequency}")

        if not self.harmonic_ratios:
            raise ValueError("harmonic_ratios must not be empty")
        self.harmonic_ratios = [float(r) for r in self.harmonic_ratios]

        if self.neighbor_count < 0:
            raise ValueError(f"neighbor_count must be non-negative, got {self.neighbor_count}")

        if self.fingerprint_top_k <= 0:
            raise ValueError(f"fingerprint_top_k must be positive, got {self.fingerprint_top_k}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WormholeConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        unknown = set(data) - set(known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")
        return cls(**known)

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "WormholeConfig":
        """Load configuration from YAML file."""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {file_path}: {e}", config_path=str(file_path)
            ) from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration in {file_path} must be a mapping", config_path=str(file_path)
            )

        return cls.from_dict(data or {})


class ConfigManager:
    """
    Resolves the active configuration.

    Lookup order: ``WORMHOLE_CONFIG`` environment variable, explicit path,
    ``.wormhole.yml`` in the working directory, built-in defaults. Scalar
    ``WORMHOLE_*`` environment overrides are applied last.
    """

    DEFAULT_CONFIG_FILE = ".wormhole.yml"
    ENV_PREFIX = "WORMHOLE_"

    ENV_OVERRIDES = {
        "DIMENSIONALITY": ("dimensionality", int),
        "ADMISSION_THRESHOLD": ("admission_threshold", float),
        "MIN_STABILITY": ("min_stability", float),
        "MIN_RESONANCE": ("min_resonance", float),
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[WormholeConfig] = None

    @property
    def config(self) -> WormholeConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> WormholeConfig:
        """Load configuration from file or defaults, then apply env overrides."""
        source = self._resolve_path()
        if source is not None:
            config = WormholeConfig.load_from_file(source)
            logger.debug(f"Loaded configuration from {source}")
        else:
            config = WormholeConfig()
        
        # Overrides are validated one at a time
        for key, value in self.get_environment_overrides().items():
            try:
                config = WormholeConfig.from_dict({**config.to_dict(), key: value})
            except ValueError as e:
                logger.warning(f"Ignoring out-of-range env value for {key}: {value!r} ({e})")
        
        self._config = config
        return self._config

    def save(self, config: Optional[WormholeConfig] = None,
             path: Optional[Union[str, Path]] = None) -> Path:
        """Save configuration and return the path written."""
        config = config or self._config or WormholeConfig()
        save_path = Path(path) if path else (self.config_path or Path(self.DEFAULT_CONFIG_FILE))
        config.save_to_file(save_path)
        self._config = config
        return save_path

    def get_environment_overrides(self) -> Dict[str, Union[int, float]]:
        """Collect valid ``WORMHOLE_*`` overrides; invalid values are skipped."""
        overrides: Dict[str, Union[int, float]] = {}

        for suffix, (key, cast) in self.ENV_OVERRIDES.items():
            raw = os.getenv(f"{self.ENV_PREFIX}{suffix}")
            if raw is None:
                continue
            try:
                overrides[key] = cast(raw)
            except ValueError:
                logger.warning(f"Invalid env value for {key}: {raw!r}")

        return overrides

    def display(self, config: Optional[WormholeConfig] = None,
                console: Optional[Console] = None) -> None:
        """Display configuration in a formatted panel."""
        config = config or self.config
        console = console or Console()

        yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
        syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=True)
        console.print(
            Panel(syntax, title="[bold cyan]Wormhole Configuration[/bold cyan]", border_style="cyan")
        )

    def _resolve_path(self) -> Optional[Path]:
        env_path = os.getenv(f"{self.ENV_PREFIX}CONFIG")
        if env_path and Path(env_path).exists():
            return Path(env_path)

        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
            return self.config_path

        default_path = Path(self.DEFAULT_CONFIG_FILE)
        if default_path.exists():
            return default_path

        return None
