"""Configuration management for guitar tuner components."""

from dataclasses import asdict, dataclass, field, fields
from typing import Dict, Any, Optional, Tuple
import json
import os
from pathlib import Path

from ..logger import get_logger
from ..note_types import STANDARD_TUNING, TargetString
from .errors import ConfigError

logger = get_logger(__name__)


@dataclass(frozen=True)
class TunerConfig:
    """Constants fixed when a tuner is constructed.

    Attributes:
        tolerance_cents: Maximum absolute deviation (inclusive) judged in tune
        confirmation_delay: Seconds a string must stay in tune before it is confirmed
        smoothing_factor: Exponential smoothing factor for ordinary jitter
        jump_smoothing_factor: Smoothing factor used when the pitch jumps
        jump_threshold: Relative change that counts as a jump (0.1 = 10%)
        min_frequency: Lowest accepted fundamental in Hz
        max_frequency: Highest accepted fundamental in Hz
        noise_floor: RMS level a frame must exceed to be analysed
        min_confidence: Minimum normalized autocorrelation to trust a lag.
            Higher values reject more harmonics and noise but take longer
            to lock onto a decaying string.
        fft_min_confidence: Below ``min_confidence`` but at or above this,
            the FFT peak is used instead of the autocorrelation lag
        use_fft_fallback: Enable the FFT fallback described above
        min_lag: Smallest lag (in samples) ever considered
        octave_tolerance: A shorter sub-multiple lag wins if its correlation
            is at least this fraction of the best one
        require_note_match: Also require the detected pitch class to equal the
            target's before a string can be confirmed
        max_display_cents: Clamp for the display offset in TuningStatus
        targets: The ordered strings to tune
    """

    tolerance_cents: float = 8.0
    confirmation_delay: float = 0.8
    smoothing_factor: float = 0.3
    jump_smoothing_factor: float = 0.5
    jump_threshold: float = 0.1
    min_frequency: float = 50.0
    max_frequency: float = 400.0
    noise_floor: float = 0.01
    min_confidence: float = 0.35
    fft_min_confidence: float = 0.2
    use_fft_fallback: bool = True
    min_lag: int = 4
    octave_tolerance: float = 0.9
    require_note_match: bool = True
    max_display_cents: float = 50.0
    targets: Tuple[TargetString, ...] = field(default=STANDARD_TUNING)

    def __post_init__(self):
        if self.tolerance_cents <= 0:
            raise ConfigError("tolerance_cents must be positive")
        if self.confirmation_delay < 0:
            raise ConfigError("confirmation_delay must not be negative")
        for name in ("smoothing_factor", "jump_smoothing_factor"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ConfigError(f"{name} must be in (0, 1], got {value}")
        if self.jump_threshold <= 0:
            raise ConfigError("jump_threshold must be positive")
        if not 0 < self.min_frequency < self.max_frequency:
            raise ConfigError(
                f"Invalid frequency band: {self.min_frequency}-{self.max_frequency} Hz"
            )
        if self.noise_floor < 0:
            raise ConfigError("noise_floor must not be negative")
        if not 0.0 <= self.fft_min_confidence <= self.min_confidence <= 1.0:
            raise ConfigError(
                "Confidence thresholds must satisfy 0 <= fft_min_confidence <= min_confidence <= 1"
            )
        if self.min_lag < 1:
            raise ConfigError("min_lag must be at least 1")
        if not 0.0 < self.octave_tolerance <= 1.0:
            raise ConfigError("octave_tolerance must be in (0, 1]")
        if self.max_display_cents <= 0:
            raise ConfigError("max_display_cents must be positive")
        if len(self.targets) == 0:
            raise ConfigError("At least one target string is required")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "TunerConfig":
        """Build a config from a mapping, ignoring unknown keys and ``targets``."""
        known = {f.name for f in fields(cls) if f.name != "targets"}
        unknown = set(values) - known
        if unknown:
            logger.warning(f"Ignoring unknown tuner settings: {sorted(unknown)}")
        return cls(**{k: v for k, v in values.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable settings; the target strings are fixed and left out."""
        data = asdict(self)
        data.pop("targets")
        return data


class ConfigManager:
    """Configuration manager for guitar tuner components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/guitar_tuner by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "guitar_tuner")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "tuner": TunerConfig().to_dict(),
            "replay": {
                "frame_size": 4096,
                "tick_ms": 100,
            },
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                logger.info(f"Loaded configuration from {config_file}")

                # Ensure all default keys are present
                for key, value in default_config.items():
                    if key not in config:
                        config[key] = value

                return config
            except (OSError, ValueError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return default_config.copy()
        else:
            config = default_config.copy()
            self.save_config(name, config)
            return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get a copy of the configuration called ``name``."""
        return self.configs.get(name, {}).copy()

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Tuner settings are validated before anything is written.

        Raises:
            ConfigError: If the updated tuner settings are invalid
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        merged = {**self.configs[name], **updates}
        if name == "tuner":
            TunerConfig.from_dict(merged)
        self.configs[name] = merged

        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = self.default_configs[name].copy()
        return self.save_config(name, self.configs[name])

    def tuner_config(self) -> TunerConfig:
        """Build a validated ``TunerConfig`` from the stored tuner settings.

        Raises:
            ConfigError: If the stored settings are invalid
        """
        return TunerConfig.from_dict(self.get_config("tuner"))
