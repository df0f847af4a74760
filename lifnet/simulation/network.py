"""Recurrent LIF network simulator.

NetworkSimulator owns a fixed population of LifNeuron objects and the
recurrent SynapticMatrix between them, and advances the whole network
one tick at a time. Each tick:

    1. advance current_time
    2. read every neuron's windowed firing rate, turn the rates into
       recurrent input through the weights (skipped in input mode)
    3. add the external stimulus
    4. step every neuron, count spikes

All inputs of a tick are computed before any neuron is stepped, so the
result does not depend on neuron order.

Two run modes produce a population-activity trace:

    generate_spikes(n)    decaying ramp stimulus plus recurrent coupling
    process_input(xs)     external samples only, then learning and
                          classification
"""

import numbers
from dataclasses import dataclass

import numpy as np

from lifnet.config import NetworkConfig
from lifnet.errors import EmptyTrace, InvalidConfiguration
from lifnet.simulation.analysis import PatternClassifier, population_activity
from lifnet.simulation.neuron import LifNeuron, heterogeneous_parameters
from lifnet.simulation.plasticity import HebbianPlasticity
from lifnet.simulation.random import PseudoRandomSource
from lifnet.simulation.stimulus import ramp_stimulus, sample_stimulus
from lifnet.simulation.synapses import build_synaptic_matrix
from lifnet.utils import get_logger

LOG = get_logger("simulation.network")


@dataclass
class NetworkStats:
    """Read-only snapshot of a network.

    Attributes
    ----------
    neuron_count : int
        Number of neurons.
    connection_count : int
        Synapses with |w| above the connection epsilon.
    average_threshold : float
        Mean firing threshold.
    recent_activity_hz : float
        Mean firing rate over the stats window.
    """
    neuron_count: int
    connection_count: int
    average_threshold: float
    recent_activity_hz: float

    def summary(self):
        return (f"Neurons: {self.neuron_count} | Connections: {self.connection_count} | "
                f"Avg Threshold: {self.average_threshold:.3f} | "
                f"Recent Activity: {self.recent_activity_hz:.1f} Hz")


@dataclass
class ProcessingResult:
    """Outcome of NetworkSimulator.process_input.

    Attributes
    ----------
    trace : np.ndarray
        Population activity per tick.
    average_activation : float
        Mean of the trace.
    label : PatternLabel
        Classification of the trace.
    learning_delta : float
        learning_rate * average_activation.
    pattern_id : str
        Identifier derived from the start time.
    start_time : int
        current_time when the run began.
    neuron_count : int
        Network size.
    n_updated : int
        Synapses strengthened by the learning step.
    """
    trace: np.ndarray
    average_activation: float
    label: object
    learning_delta: float
    pattern_id: str
    start_time: int
    neuron_count: int
    n_updated: int = 0

    @property
    def network_state(self):
        return f"Active neurons: {self.average_activation * 100:.1f}%"

    def as_dict(self):
        """Plain-data view, suitable for any serializer."""
        return {
            "trace": [float(x) for x in self.trace],
            "average_activation": float(self.average_activation),
            "label": str(self.label),
            "learning_delta": float(self.learning_delta),
            "pattern_id": self.pattern_id,
            "start_time": int(self.start_time),
            "neuron_count": int(self.neuron_count),
            "n_updated": int(self.n_updated),
            "network_state": self.network_state,
        }


def _check_count(value, name, allow_zero=False):
    if not isinstance(value, numbers.Integral) or isinstance(value, bool):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidConfiguration(f"{name} must be {bound}, got {value}")
    return int(value)


class NetworkSimulator:
    """A recurrent network of heterogeneous LIF neurons.

    Parameters
    ----------
    network_size : int
        Number of neurons, fixed for the simulator's lifetime.
    config : NetworkConfig, optional
        Model constants. Defaults to NetworkConfig().
    log : logger, optional
        Any object with .debug/.info/.warning/.error, e.g. from
        lifnet.utils.get_logger. Defaults to the module logger.
    classifier : PatternClassifier, optional
        Used by process_input.

    Raises
    ------
    InvalidConfiguration
        If network_size is not a positive integer.
    """

    def __init__(self, network_size, config=None, log=None, classifier=None):
        self.network_size = _check_count(network_size, "network_size")
        self.config = config if config is not None else NetworkConfig()
        self.log = log if log is not None else LOG
        self.classifier = classifier if classifier is not None else PatternClassifier()
        self.current_time = 0

        self.neurons = []
        for i in range(self.network_size):
            threshold, leak_rate = heterogeneous_parameters(i)
            self.neurons.append(LifNeuron(
                threshold, leak_rate,
                refractory_period=self.config.refractory_period,
                history_capacity=self.config.history_capacity,
            ))

        seed = self.config.seed
        if seed is None:
            seed = self.current_time + self.network_size
        self.rng = PseudoRandomSource(seed, advance=self.config.advance_seed)
        self.synapses = build_synaptic_matrix(self.network_size, self.rng, self.config,
                                              log=self.log)
        self.plasticity = HebbianPlasticity.from_config(self.config, log=self.log)

        self.log.info("Built network: %d neurons, %d connections (seed=%d)",
                      self.network_size, self.synapses.n_connections, seed)

    @property
    def learning_rate(self):
        return self.plasticity.learning_rate

    @property
    def thresholds(self):
        return np.array([n.threshold for n in self.neurons])

    @property
    def leak_rates(self):
        return np.array([n.leak_rate for n in self.neurons])

    def firing_rates(self, window):
        """Per-neuron firing rate over the last `window` ticks.

        Raises
        ------
        InvalidWindow
            If window is zero or negative.
        """
        return np.array([n.firing_rate(window, self.current_time) for n in self.neurons],
                        dtype=np.float64)

    def step(self, external_input, recurrent=True):
        """Advance the whole network by one tick.

        Parameters
        ----------
        external_input : array-like
            Input current per neuron, shape (network_size,).
        recurrent : bool
            Add input from the recurrent weights.

        Returns
        -------
        np.ndarray
            Boolean spike mask, shape (network_size,).
        """
        currents = np.array(external_input, dtype=np.float64)
        if currents.shape != (self.network_size,):
            raise ValueError(f"Expected input of shape ({self.network_size},), "
                             f"got {currents.shape}")

        self.current_time += 1

        if recurrent:
            rates = self.firing_rates(self.config.recurrent_window)
            currents += self.synapses.recurrent_input(rates, self.config.recurrent_gain)

        return np.array([
            neuron.step(current, self.current_time)
            for neuron, current in zip(self.neurons, currents)
        ], dtype=bool)

    def generate_spikes(self, pattern_length):
        """Run the network under a decaying ramp stimulus.

        The first pattern_length // 3 ticks receive the ramp; the rest of
        the run is driven by recurrent input alone.

        Parameters
        ----------
        pattern_length : int
            Number of ticks.

        Returns
        -------
        np.ndarray
            Population activity per tick, each value in [0, 1].
        """
        pattern_length = _check_count(pattern_length, "pattern_length", allow_zero=True)
        stimulus, protocol = ramp_stimulus(self.network_size, pattern_length,
                                           strength=self.config.stimulus_strength)

        self.log.info("Generating spikes: %d ticks, %s stimulus over %d ticks",
                      pattern_length, protocol.name, protocol.params["duration"])

        trace = np.zeros(pattern_length, dtype=np.float64)
        for t in range(pattern_length):
            spiked = self.step(stimulus[:, t], recurrent=True)
            trace[t] = population_activity(spiked)

        self.log.info("Spike generation complete: mean activity %.3f, peak %.3f",
                      float(trace.mean()) if pattern_length else 0.0,
                      float(trace.max()) if pattern_length else 0.0)
        return trace

    def process_input(self, samples):
        """Drive the network with an input sequence, learn, and classify.

        Samples beyond max_input_samples are ignored. Only the external
        input drives the network in this mode; there is no recurrent
        coupling. After the run the Hebbian rule is applied with the mean
        activation, and the trace is classified.

        Parameters
        ----------
        samples : sequence of float
            One input value per tick.

        Returns
        -------
        ProcessingResult

        Raises
        ------
        EmptyTrace
            If samples is empty.
        """
        samples = np.asarray(samples, dtype=np.float64).ravel()
        if samples.size == 0:
            raise EmptyTrace("process_input needs at least one sample")

        stimulus, protocol = sample_stimulus(samples, self.network_size,
                                             gain=self.config.input_gain,
                                             max_samples=self.config.max_input_samples)
        n_steps = stimulus.shape[1]
        start_time = self.current_time

        self.log.info("Processing input: %d samples (%d used)", samples.size, n_steps)

        trace = np.zeros(n_steps, dtype=np.float64)
        for t in range(n_steps):
            spiked = self.step(stimulus[:, t], recurrent=False)
            trace[t] = population_activity(spiked)

        average_activation = float(trace.mean())
        n_updated = self.apply_learning(average_activation)
        label = self.classifier.classify(trace)

        result = ProcessingResult(
            trace=trace,
            average_activation=average_activation,
            label=label,
            learning_delta=self.learning_rate * average_activation,
            pattern_id=f"pattern_{start_time}",
            start_time=start_time,
            neuron_count=self.network_size,
            n_updated=n_updated,
        )
        self.log.info("Input processed: %.3f avg activation, label %s",
                      average_activation, label)
        return result

    def apply_learning(self, activation_strength):
        """Apply the Hebbian rule to the recurrent weights.

        Returns
        -------
        int
            Number of synapses strengthened.
        """
        rates = self.firing_rates(self.plasticity.window)
        return self.plasticity(self.synapses, rates, activation_strength)

    def network_stats(self):
        """Snapshot of size, connectivity, thresholds and recent activity."""
        rates = self.firing_rates(self.config.stats_window)
        return NetworkStats(
            neuron_count=self.network_size,
            connection_count=self.synapses.n_connections,
            average_threshold=float(self.thresholds.mean()),
            recent_activity_hz=float(rates.mean()),
        )

    def reset_state(self):
        """Return every neuron to rest and rewind the clock. Weights are kept."""
        for neuron in self.neurons:
            neuron.reset()
        self.current_time = 0

    def summary(self):
        """Return a summary string."""
        return "\n".join([
            self.network_stats().summary(),
            self.synapses.summary(),
            f"  current_time: {self.current_time}",
        ])
