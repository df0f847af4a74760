"""Stimulus protocols for the LIF network.

Each function returns a stimulus array of shape (n_neurons, n_steps)
holding the external input current of every neuron at every tick,
together with a StimulusProtocol describing it.
"""

from dataclasses import dataclass

import numpy as np


@dataclass
class StimulusProtocol:
    """Description of a stimulus for provenance tracking.

    Attributes
    ----------
    name : str
        Protocol name.
    params : dict
        Protocol parameters.
    """
    name: str
    params: dict


def ramp_stimulus(n_neurons, n_steps, strength=0.5):
    """Decaying ramp over the first third of a run.

    At tick t < n_steps // 3 neuron i receives

        strength * (1 - t / duration) * (0.5 + 0.5 * sin(0.1 * i))

    and nothing afterwards.

    Parameters
    ----------
    n_neurons : int
        Total number of neurons.
    n_steps : int
        Number of ticks.
    strength : float
        Peak amplitude at t = 0.

    Returns
    -------
    stimulus : np.ndarray
        Shape (n_neurons, n_steps).
    protocol : StimulusProtocol
    """
    stimulus = np.zeros((n_neurons, n_steps), dtype=np.float64)
    duration = n_steps // 3

    if duration > 0:
        t = np.arange(duration)
        envelope = strength * (1.0 - t / duration)
        profile = 0.5 + 0.5 * np.sin(np.arange(n_neurons) * 0.1)
        stimulus[:, :duration] = np.outer(profile, envelope)

    protocol = StimulusProtocol(
        name="ramp",
        params={"strength": strength, "duration": duration},
    )

    return stimulus, protocol


def sample_stimulus(samples, n_neurons, gain=2.0, max_samples=100):
    """Spread a scalar input sequence over the population.

    Sample t drives neuron i with

        samples[t] * gain * (0.8 + 0.4 * sin(0.2 * i))

    Parameters
    ----------
    samples : sequence of float
        Input values, one per tick. Truncated to max_samples.
    n_neurons : int
        Total number of neurons.
    gain : float
        Input scaling.
    max_samples : int
        Longest sequence consumed.

    Returns
    -------
    stimulus : np.ndarray
        Shape (n_neurons, min(len(samples), max_samples)).
    protocol : StimulusProtocol
    """
    samples = np.asarray(samples, dtype=np.float64)
    truncated = len(samples) > max_samples
    samples = samples[:max_samples]
    profile = 0.8 + 0.4 * np.sin(np.arange(n_neurons) * 0.2)
    stimulus = np.outer(profile, samples * gain)

    protocol = StimulusProtocol(
        name="samples",
        params={"gain": gain, "n_samples": len(samples),
                "truncated": truncated},
    )

    return stimulus, protocol
