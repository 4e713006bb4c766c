"""Engine configuration: tunable rates, fixed constants, named presets.

The tunable fields live on a mutable EngineConfig that the engine reads
afresh on every tick() and stimulate() call, so a control surface can
change them at any time between calls. Nothing here is validated by the
engine; CONTROL_RANGES records the ranges the portal sliders impose.
"""

from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path

import yaml

from lifscope.utils import get_logger

LOG = get_logger("simulation.config")


# ---------------------------------------------------------------------------
# Fixed model constants
# ---------------------------------------------------------------------------

TIME_STEP = 1                 # ticks added per tick()
REFRACTORY_PERIOD = 5         # ticks after a spike with no stimulus accepted
THRESHOLD_INCREMENT = 0.1     # spike-triggered threshold adaptation
INITIAL_THRESHOLD = 1.0
MAX_SPIKES_DISPLAY = 20       # retained spike times
MAX_DATA_POINTS = 1000        # retained samples


# ---------------------------------------------------------------------------
# Tunable configuration
# ---------------------------------------------------------------------------

@dataclass
class EngineConfig:
    """Rates and floors read by the engine on every operation.

    Parameters
    ----------
    decay_rate : float
        Potential lost per tick.
    threshold_decay_rate : float
        Threshold relaxation per tick while not refractory.
    min_threshold : float
        Floor the threshold relaxes toward.
    spike_magnitude : float
        Stimulus added by the primary "send spike" action.
    """
    decay_rate: float = 0.01
    threshold_decay_rate: float = 0.01
    min_threshold: float = 1.0
    spike_magnitude: float = 0.5

    @classmethod
    def from_dict(cls, values):
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(
                f"Unknown configuration keys: {sorted(unknown)}; "
                f"expected a subset of {sorted(known)}"
            )
        return cls(**{k: float(v) for k, v in values.items()})

    def to_dict(self):
        return asdict(self)

    def update(self, **values):
        """Set several fields in place. Unknown names raise ValueError."""
        known = {f.name for f in fields(self)}
        for key, value in values.items():
            if key not in known:
                raise ValueError(f"Unknown configuration key: {key!r}")
            setattr(self, key, value)
        return self

    def clamp_to_controls(self):
        """A copy with every field clamped into CONTROL_RANGES."""
        clamped = {}
        for key, value in self.to_dict().items():
            lo, hi, _ = CONTROL_RANGES[key]
            clamped[key] = min(max(value, lo), hi)
        return replace(self, **clamped)


# (start, end, step) of the slider for each tunable field
CONTROL_RANGES = {
    "decay_rate": (0.001, 0.1, 0.001),
    "threshold_decay_rate": (0.001, 0.1, 0.001),
    "min_threshold": (0.001, 2.5, 0.001),
    "spike_magnitude": (0.1, 1.0, 0.1),
}


CONFIG_PRESETS = {
    "default": EngineConfig(),
    # Fast leak: single stimuli fade before the next one arrives
    "leaky": EngineConfig(
        decay_rate=0.05, threshold_decay_rate=0.01,
        min_threshold=1.0, spike_magnitude=0.5,
    ),
    # Low floor and large stimuli: nearly every accepted stimulus fires
    "excitable": EngineConfig(
        decay_rate=0.005, threshold_decay_rate=0.02,
        min_threshold=0.5, spike_magnitude=0.8,
    ),
    # Slow threshold relaxation: adaptation accumulates across spikes
    "sticky_threshold": EngineConfig(
        decay_rate=0.01, threshold_decay_rate=0.001,
        min_threshold=1.0, spike_magnitude=0.6,
    ),
}


def get_preset(name):
    """Return a fresh copy of a named preset."""
    try:
        preset = CONFIG_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset {name!r}; available: {sorted(CONFIG_PRESETS)}"
        )
    return replace(preset)


# ---------------------------------------------------------------------------
# YAML persistence
# ---------------------------------------------------------------------------

def load_config(path):
    """Load an EngineConfig from a YAML file.

    The file holds a flat mapping of field names to numbers, or a single
    ``preset: <name>`` entry optionally followed by overrides.
    """
    path = Path(path)
    with open(path, "r") as f:
        values = yaml.safe_load(f) or {}

    preset = values.pop("preset", None)
    if preset is not None:
        config = get_preset(preset).update(**{k: float(v) for k, v in values.items()})
    else:
        config = EngineConfig.from_dict(values)

    LOG.info("Loaded configuration from %s: %s", path, config)
    return config


def dump_config(config, path):
    """Write an EngineConfig to a YAML file. Returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False)
    LOG.info("Wrote configuration to %s", path)
    return path
