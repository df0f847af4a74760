"""Post-run analysis of population-activity traces.

A trace is one population-activity value per tick: the fraction of
neurons that spiked. PatternClassifier assigns a discrete label from two
aggregate statistics of the trace, its sum and its (population) variance.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from lifnet.errors import EmptyTrace


class PatternLabel(str, Enum):
    """Labels assigned by PatternClassifier."""
    COMPLEX_BURST = "complex_burst"
    STEADY_OSCILLATION = "steady_oscillation"
    CHAOTIC_FIRING = "chaotic_firing"
    WEAK_ACTIVATION = "weak_activation"
    MINIMAL_RESPONSE = "minimal_response"

    def __str__(self):
        return self.value


def population_activity(spiked):
    """Fraction of True entries in a spike mask."""
    spiked = np.asarray(spiked, dtype=bool)
    if spiked.size == 0:
        return 0.0
    return float(np.count_nonzero(spiked)) / spiked.size


def active_fraction(rates, threshold_hz=1.0):
    """Fraction of neurons firing above a threshold rate.

    Parameters
    ----------
    rates : array-like
        Per-neuron firing rate (Hz).
    threshold_hz : float
        Minimum rate to count as active.

    Returns
    -------
    float
    """
    rates = np.asarray(rates, dtype=np.float64)
    if rates.size == 0:
        return 0.0
    return float(np.mean(rates > threshold_hz))


def trace_statistics(trace):
    """Aggregate statistics of an activity trace.

    Parameters
    ----------
    trace : sequence of float
        Population activity per tick.

    Returns
    -------
    dict
        sum, mean, variance (population, ddof=0), peak, n_steps.

    Raises
    ------
    EmptyTrace
        If the trace has no ticks.
    """
    trace = np.asarray(trace, dtype=np.float64)
    if trace.size == 0:
        raise EmptyTrace("Cannot compute statistics of an empty activity trace")

    mean = float(np.mean(trace))
    return {
        "sum": float(np.sum(trace)),
        "mean": mean,
        "variance": float(np.mean((trace - mean) ** 2)),
        "peak": float(np.max(trace)),
        "n_steps": int(trace.size),
    }


@dataclass(frozen=True)
class PatternClassifier:
    """Label an activity trace from its sum and variance.

    Rules are tried in order, first match wins:

        1. sum > burst_sum and variance > burst_variance  -> complex_burst
        2. sum > steady_sum and variance < steady_variance -> steady_oscillation
        3. variance > chaotic_variance                     -> chaotic_firing
        4. sum > weak_sum                                  -> weak_activation
        5. otherwise                                       -> minimal_response
    """
    burst_sum: float = 5.0
    burst_variance: float = 0.1
    steady_sum: float = 2.0
    steady_variance: float = 0.05
    chaotic_variance: float = 0.2
    weak_sum: float = 1.0

    def label_for(self, total, variance):
        """Apply the rule table to precomputed statistics."""
        if total > self.burst_sum and variance > self.burst_variance:
            return PatternLabel.COMPLEX_BURST
        if total > self.steady_sum and variance < self.steady_variance:
            return PatternLabel.STEADY_OSCILLATION
        if variance > self.chaotic_variance:
            return PatternLabel.CHAOTIC_FIRING
        if total > self.weak_sum:
            return PatternLabel.WEAK_ACTIVATION
        return PatternLabel.MINIMAL_RESPONSE

    def classify(self, trace):
        """Label a trace.

        Raises
        ------
        EmptyTrace
            If the trace has no ticks.
        """
        stats = trace_statistics(trace)
        return self.label_for(stats["sum"], stats["variance"])


def classify_pattern(trace):
    """Label a trace with the default thresholds."""
    return PatternClassifier().classify(trace)
