"""Single leaky integrate-and-fire neuron.

Discrete-tick dynamics, one call to step() per tick:

    refractory:  counter -= 1, V = 0, input discarded
    otherwise:   V = V * (1 - leak_rate) + I
                 V >= threshold  ->  spike, V = 0, counter = refractory_period

Spike times are kept in a bounded FIFO history, which is all the
windowed firing-rate estimate looks at.
"""

from collections import deque

from lifnet.errors import InvalidWindow

REFRACTORY_PERIOD = 5
HISTORY_CAPACITY = 100


def heterogeneous_parameters(index):
    """Threshold and leak rate of the neuron at a network position.

    Deterministic in the index, cycling through five thresholds in
    [1.0, 1.5) and five leak rates in [0.1, 0.15).

    Returns
    -------
    threshold, leak_rate : float
    """
    threshold = 1.0 + (index * 0.1) % 0.5
    leak_rate = 0.1 + (index * 0.01) % 0.05
    return threshold, leak_rate


class LifNeuron:
    """A leaky integrate-and-fire neuron with refractory dynamics.

    Attributes
    ----------
    membrane_potential : float
        Accumulated charge. Held at 0 while refractory.
    threshold : float
        Firing threshold.
    leak_rate : float
        Fraction of potential lost per tick.
    refractory_period : int
        Ticks of refraction after a spike.
    refractory_counter : int
        Remaining refractory ticks.
    spike_history : collections.deque
        Spike timestamps, oldest first, at most history_capacity long.
    """

    def __init__(self, threshold, leak_rate, refractory_period=REFRACTORY_PERIOD,
                 history_capacity=HISTORY_CAPACITY):
        self.threshold = float(threshold)
        self.leak_rate = float(leak_rate)
        self.refractory_period = int(refractory_period)
        self.membrane_potential = 0.0
        self.refractory_counter = 0
        self.spike_history = deque(maxlen=history_capacity)

    @property
    def is_refractory(self):
        return self.refractory_counter > 0

    @property
    def n_spikes(self):
        """Spikes currently held in the history."""
        return len(self.spike_history)

    def step(self, input_current, timestep):
        """Advance one tick.

        Parameters
        ----------
        input_current : float
            Total input this tick. Ignored while refractory.
        timestep : int
            Timestamp recorded if the neuron spikes.

        Returns
        -------
        bool
            True if the neuron spiked.
        """
        if self.refractory_counter > 0:
            self.refractory_counter -= 1
            self.membrane_potential = 0.0
            return False

        self.membrane_potential *= 1.0 - self.leak_rate
        self.membrane_potential += input_current

        if self.membrane_potential >= self.threshold:
            self.membrane_potential = 0.0
            self.refractory_counter = self.refractory_period
            # deque(maxlen) evicts the oldest timestamp
            self.spike_history.append(timestep)
            return True

        return False

    def firing_rate(self, window, current_time):
        """Spikes per thousand ticks over the last `window` ticks.

        Counts history entries with timestamp >= max(0, current_time - window).

        Raises
        ------
        InvalidWindow
            If window is zero or negative.
        """
        if window <= 0:
            raise InvalidWindow(f"Firing-rate window must be positive, got {window}")

        cutoff = max(0, current_time - window)
        count = sum(1 for t in self.spike_history if t >= cutoff)
        return (count / window) * 1000.0

    def reset(self):
        """Return to the resting state and forget all spikes."""
        self.membrane_potential = 0.0
        self.refractory_counter = 0
        self.spike_history.clear()

    def __repr__(self):
        return (f"LifNeuron(threshold={self.threshold:.3f}, leak_rate={self.leak_rate:.3f}, "
                f"V={self.membrane_potential:.3f}, refractory={self.refractory_counter})")
