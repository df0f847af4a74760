"""Coincidence-based Hebbian plasticity for the recurrent weights.

After a run, every existing synapse whose source and target neuron both
fired above a rate threshold over a recent window is strengthened:

    dw = learning_rate * activation_strength * scale
    w  = clip(w + dw, w_min, w_max)

The rule never creates or prunes synapses. It is applied post hoc,
once per call, not per tick.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from lifnet.utils import get_logger

LOG = get_logger("simulation.plasticity")


@dataclass
class HebbianPlasticity:
    """Strengthen synapses between co-active neurons.

    Parameters
    ----------
    learning_rate : float
        Base learning rate.
    window : int
        Firing-rate window (ticks) used to judge co-activity.
    rate_threshold_hz : float
        Both neurons must fire strictly above this rate.
    scale : float
        Extra factor on the weight increment.
    w_min, w_max : float
        Clamp bounds for every updated weight.
    log : logger, optional
        Defaults to the module logger.
    """
    learning_rate: float = 0.01
    window: int = 20
    rate_threshold_hz: float = 1.0
    scale: float = 0.1
    w_min: float = -1.0
    w_max: float = 1.0
    log: Optional[Callable] = field(default=None, repr=False)

    n_applications: int = field(default=0, init=False)
    history: List = field(default_factory=list, init=False, repr=False)

    @classmethod
    def from_config(cls, config, log=None):
        return cls(
            learning_rate=config.learning_rate,
            window=config.plasticity_window,
            rate_threshold_hz=config.plasticity_rate_threshold,
            scale=config.plasticity_scale,
            w_min=config.weight_min,
            w_max=config.weight_max,
            log=log,
        )

    def delta(self, activation_strength):
        """Weight increment for a given activation strength."""
        return self.learning_rate * activation_strength * self.scale

    def __call__(self, synapses, rates, activation_strength):
        """Apply the rule once.

        Parameters
        ----------
        synapses : SynapticMatrix
            Mutated in place.
        rates : np.ndarray
            Per-neuron firing rate over `window`, read before any update.
        activation_strength : float
            Scales the increment, typically the mean population activity.

        Returns
        -------
        int
            Number of synapses updated.
        """
        active = np.asarray(rates) > self.rate_threshold_hz

        delta = self.delta(activation_strength)

        n_updated = synapses.strengthen(active, delta, self.w_min, self.w_max)

        self.n_applications += 1
        self.history.append({
            "activation_strength": activation_strength,
            "delta": delta,
            "n_updated": n_updated,
        })
        (self.log or LOG).debug("Hebbian update: %d/%d synapses, dw=%.6f (%d active neurons)",
                                n_updated, synapses.n_connections, delta,
                                int(active.sum()))
        return n_updated

    def weight_change_summary(self, synapses, initial_weights):
        """Summarize weight changes relative to initial values.

        Parameters
        ----------
        synapses : SynapticMatrix
            Current state.
        initial_weights : np.ndarray
            Output of synapses.copy_weights() taken before learning.

        Returns
        -------
        dict
        """
        delta = synapses.copy_weights() - initial_weights
        return {
            "global_mean_change": float(np.mean(delta)) if delta.size else 0.0,
            "max_change": float(np.max(np.abs(delta))) if delta.size else 0.0,
            "n_strengthened": int(np.sum(delta > 1e-12)),
            "n_weakened": int(np.sum(delta < -1e-12)),
            "n_applications": self.n_applications,
        }
