"""Recurrent synaptic weights of the LIF network.

Two storage layouts share one contract:

    SynapticMatrix       dense (n, n) array, weights[source, target]
    EdgeSynapticMatrix   pre_idx / post_idx / weights edge arrays

Connectivity is sparse and distance-biased, so large networks are built
as edge arrays. Both layouts treat |w| <= epsilon as "not connected" and
keep self-edges at zero.
"""

import numpy as np
import pandas as pd

from lifnet.utils import get_logger

LOG = get_logger("simulation.synapses")


class SynapticMatrix:
    """Dense n x n weight matrix, indexed [source, target].

    Parameters
    ----------
    weights : np.ndarray
        Square weight array. Copied; the diagonal is zeroed.
    epsilon : float
        Magnitude above which a weight counts as a connection.
    """

    def __init__(self, weights, epsilon=0.001):
        weights = np.array(weights, dtype=np.float64)
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
            raise ValueError(f"Weights must be square, got shape {weights.shape}")
        np.fill_diagonal(weights, 0.0)
        self.weights = weights
        self.epsilon = epsilon

    @classmethod
    def empty(cls, n_neurons, epsilon=0.001):
        return cls(np.zeros((n_neurons, n_neurons)), epsilon=epsilon)

    @property
    def n_neurons(self):
        return self.weights.shape[0]

    @property
    def n_connections(self):
        return int(np.count_nonzero(self.connection_mask()))

    def weight(self, source, target):
        return float(self.weights[source, target])

    def connection_mask(self):
        """Dense boolean (n, n) mask of connected [source, target] pairs."""
        return np.abs(self.weights) > self.epsilon

    def recurrent_input(self, rates, gain):
        """Input to every neuron from the rates of its presynaptic partners.

        input[i] = gain * sum_j w[j, i] * rates[j], over connected j != i.
        """
        rates = np.asarray(rates, dtype=np.float64)
        effective = np.where(self.connection_mask(), self.weights, 0.0)
        return gain * (effective.T @ rates)

    def strengthen(self, active, delta, w_min=-1.0, w_max=1.0):
        """Add delta to connected synapses between active neurons, then clamp.

        Parameters
        ----------
        active : np.ndarray
            Boolean per-neuron mask; a synapse is updated when both its
            source and target are active.
        delta : float
            Weight increment.
        w_min, w_max : float
            Clamp bounds for updated weights.

        Returns
        -------
        int
            Number of synapses updated.
        """
        active = np.asarray(active, dtype=bool)
        update = self.connection_mask() & np.outer(active, active)
        np.fill_diagonal(update, False)
        self.weights[update] += delta
        self.weights[update] = np.clip(self.weights[update], w_min, w_max)
        return int(np.count_nonzero(update))

    def copy_weights(self):
        return self.weights.copy()

    def to_edges(self):
        """Connected synapses as a DataFrame with pre_idx, post_idx, weight."""
        pre, post = np.nonzero(self.connection_mask())
        return pd.DataFrame({
            "pre_idx": pre.astype(np.int32),
            "post_idx": post.astype(np.int32),
            "weight": self.weights[pre, post],
        })

    def summary(self):
        """Return a summary string."""
        edges = self.to_edges()
        lines = [
            f"{type(self).__name__}: {self.n_neurons:,} neurons, "
            f"{self.n_connections:,} connections",
        ]
        if len(edges) > 0:
            lines.append(f"  weight range: [{edges['weight'].min():.4f}, "
                         f"{edges['weight'].max():.4f}]")
        else:
            lines.append("  weight range: (no synapses)")
        return "\n".join(lines)


class EdgeSynapticMatrix(SynapticMatrix):
    """The same weights stored as parallel edge arrays.

    Attributes
    ----------
    pre_idx, post_idx : np.ndarray
        Source and target neuron of every stored edge.
    weights : np.ndarray
        Weight of every stored edge.
    """

    def __init__(self, n_neurons, pre_idx, post_idx, weights, epsilon=0.001):
        pre_idx = np.asarray(pre_idx, dtype=np.int32)
        post_idx = np.asarray(post_idx, dtype=np.int32)
        weights = np.asarray(weights, dtype=np.float64)
        keep = pre_idx != post_idx
        self._n_neurons = int(n_neurons)
        self.pre_idx = pre_idx[keep]
        self.post_idx = post_idx[keep]
        self.weights = weights[keep].copy()
        self.epsilon = epsilon

    @classmethod
    def empty(cls, n_neurons, epsilon=0.001):
        return cls(n_neurons, [], [], [], epsilon=epsilon)

    @property
    def n_neurons(self):
        return self._n_neurons

    @property
    def n_connections(self):
        return int(np.count_nonzero(self._connected()))

    def _connected(self):
        return np.abs(self.weights) > self.epsilon

    def weight(self, source, target):
        hit = (self.pre_idx == source) & (self.post_idx == target)
        return float(self.weights[hit].sum())

    def connection_mask(self):
        """Dense (n, n) view for inspection; run and learning paths never build it."""
        mask = np.zeros((self.n_neurons, self.n_neurons), dtype=bool)
        connected = self._connected()
        mask[self.pre_idx[connected], self.post_idx[connected]] = True
        return mask

    def recurrent_input(self, rates, gain):
        rates = np.asarray(rates, dtype=np.float64)
        currents = np.zeros(self.n_neurons, dtype=np.float64)
        connected = self._connected()
        np.add.at(currents, self.post_idx[connected],
                  self.weights[connected] * rates[self.pre_idx[connected]])
        return gain * currents

    def strengthen(self, active, delta, w_min=-1.0, w_max=1.0):
        active = np.asarray(active, dtype=bool)
        update = self._connected() & active[self.pre_idx] & active[self.post_idx]
        self.weights[update] = np.clip(self.weights[update] + delta, w_min, w_max)
        return int(np.count_nonzero(update))

    def to_edges(self):
        connected = self._connected()
        return pd.DataFrame({
            "pre_idx": self.pre_idx[connected],
            "post_idx": self.post_idx[connected],
            "weight": self.weights[connected],
        })


def build_synaptic_matrix(n_neurons, rng, config, sparse=None, log=None):
    """Build distance-biased sparse recurrent connectivity.

    For every ordered pair (i, j), i != j, in row-major order:

        distance = |i - j| / n
        p = connection_scale * max(0, 1 - distance)
        connect if rng.random() < p, with weight (rng.random() - 0.5) * weight_scale

    The draw order is part of the contract: the same generator state
    always yields the same connectivity.

    Parameters
    ----------
    n_neurons : int
        Network size.
    rng : PseudoRandomSource
        Generator consumed by the build.
    config : NetworkConfig
        Supplies connection_scale, weight_scale, connection_epsilon
        and sparse_threshold.
    sparse : bool, optional
        Force a layout. Default: edge arrays above sparse_threshold.
    log : logger, optional
        Defaults to the module logger.

    Returns
    -------
    SynapticMatrix or EdgeSynapticMatrix
    """
    if sparse is None:
        sparse = n_neurons > config.sparse_threshold

    pre_list = []
    post_list = []
    weight_list = []

    for i in range(n_neurons):
        for j in range(n_neurons):
            if i == j:
                continue
            distance = abs(i - j) / n_neurons
            connection_prob = config.connection_scale * max(0.0, 1.0 - distance)
            if rng.random() < connection_prob:
                pre_list.append(i)
                post_list.append(j)
                weight_list.append((rng.random() - 0.5) * config.weight_scale)

    if sparse:
        synapses = EdgeSynapticMatrix(n_neurons, pre_list, post_list, weight_list,
                                      epsilon=config.connection_epsilon)
    else:
        dense = np.zeros((n_neurons, n_neurons), dtype=np.float64)
        if pre_list:
            dense[np.array(pre_list), np.array(post_list)] = weight_list
        synapses = SynapticMatrix(dense, epsilon=config.connection_epsilon)

    (log or LOG).debug("Built %s: %d neurons, %d connections",
              type(synapses).__name__, n_neurons, synapses.n_connections)
    return synapses
