"""Model constants for the LIF network, and loading them from YAML.

All time-like quantities (refractory period, rate windows) are counted in
simulation ticks. Rates are still reported as "Hz", i.e. spikes per
thousand ticks, which is how the model has always scaled them.

Usage:
    from lifnet.config import NetworkConfig, load_config
    config = load_config("network.yaml")
    config = NetworkConfig(learning_rate=0.05)
"""

import numbers
from dataclasses import asdict, dataclass, fields, replace
from typing import Optional

import yaml

from lifnet.errors import InvalidConfiguration


@dataclass(frozen=True)
class NetworkConfig:
    """Parameters of a NetworkSimulator.

    Defaults are the standard model constants.
    """
    refractory_period: int = 5         # ticks of refraction after a spike
    history_capacity: int = 100        # spike timestamps kept per neuron
    learning_rate: float = 0.01
    connection_scale: float = 0.1      # peak connection probability
    weight_scale: float = 0.2          # w = (draw - 0.5) * weight_scale
    connection_epsilon: float = 0.001  # |w| above which a synapse exists
    stimulus_strength: float = 0.5     # peak of the generate_spikes ramp
    recurrent_window: int = 10         # rate window for recurrent input
    recurrent_gain: float = 0.01
    input_gain: float = 2.0
    max_input_samples: int = 100
    plasticity_window: int = 20
    plasticity_rate_threshold: float = 1.0   # Hz
    plasticity_scale: float = 0.1
    weight_min: float = -1.0
    weight_max: float = 1.0
    stats_window: int = 100
    sparse_threshold: int = 2000       # above this, weights are edge arrays
    seed: Optional[int] = None         # None: current_time + network_size
    advance_seed: bool = True

    def __post_init__(self):
        for name in ("learning_rate", "connection_scale", "weight_scale",
                     "connection_epsilon", "stimulus_strength", "recurrent_gain",
                     "input_gain", "plasticity_rate_threshold", "plasticity_scale",
                     "weight_min", "weight_max"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Real) or isinstance(value, bool):
                raise InvalidConfiguration(f"{name} must be a number, got {value!r}")

        for name in ("refractory_period", "history_capacity", "recurrent_window",
                     "plasticity_window", "stats_window", "max_input_samples",
                     "sparse_threshold"):
            value = getattr(self, name)
            floor = 0 if name == "refractory_period" else 1
            if not isinstance(value, numbers.Integral) or isinstance(value, bool) \
                    or value < floor:
                raise InvalidConfiguration(
                    f"{name} must be an integer >= {floor}, got {value!r}")

        if not 0.0 <= self.connection_scale <= 1.0:
            raise InvalidConfiguration(
                f"connection_scale must lie in [0, 1], got {self.connection_scale}")
        if self.connection_epsilon < 0:
            raise InvalidConfiguration(
                f"connection_epsilon must be >= 0, got {self.connection_epsilon}")
        if self.weight_min > self.weight_max:
            raise InvalidConfiguration(
                f"weight_min ({self.weight_min}) exceeds weight_max ({self.weight_max})")
        if self.seed is not None:
            if not isinstance(self.seed, numbers.Integral) or isinstance(self.seed, bool) \
                    or self.seed < 0:
                raise InvalidConfiguration(
                    f"seed must be a non-negative integer, got {self.seed!r}")
        if not isinstance(self.advance_seed, bool):
            raise InvalidConfiguration(
                f"advance_seed must be true or false, got {self.advance_seed!r}")

    @classmethod
    def from_dict(cls, values):
        """Build a config from a mapping, rejecting unknown keys."""
        values = dict(values or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise InvalidConfiguration(
                f"Unknown configuration keys {unknown}. Known keys: {sorted(known)}")
        return cls(**values)

    def replace(self, **changes):
        """Copy of this config with some fields changed."""
        return replace(self, **changes)

    def as_dict(self):
        return asdict(self)


def load_config(path):
    """Load a NetworkConfig from a YAML file.

    The file holds a flat mapping of NetworkConfig fields. An empty file
    yields the defaults.
    """
    with open(path, "r") as fptr:
        values = yaml.load(fptr, Loader=yaml.FullLoader)

    if values is None:
        return NetworkConfig()
    if not isinstance(values, dict):
        raise InvalidConfiguration(
            f"Expected a mapping in {path}, found {type(values).__name__}")

    return NetworkConfig.from_dict(values)
