"""Tests for the network simulator.

Uses small networks (10-30 neurons) so every run is fast.
"""

import io

import numpy as np
import pytest

from lifnet.config import NetworkConfig
from lifnet.errors import EmptyTrace, InvalidConfiguration, InvalidWindow
from lifnet.simulation.analysis import PatternLabel
from lifnet.simulation.network import NetworkSimulator, NetworkStats, ProcessingResult
from lifnet.simulation.synapses import EdgeSynapticMatrix, SynapticMatrix
from lifnet.utils import get_logger, null_logger


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def quiet():
    return null_logger()


@pytest.fixture
def ten_neurons(quiet):
    return NetworkSimulator(10, log=quiet)


@pytest.fixture
def two_neurons(quiet):
    """Two neurons, neuron 0 excites neuron 1 with weight 0.5."""
    sim = NetworkSimulator(2, log=quiet)
    sim.synapses = SynapticMatrix(np.array([[0.0, 0.5], [0.0, 0.0]]))
    return sim


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    @pytest.mark.parametrize("size", [0, -3, 2.5, True, "10"])
    def test_invalid_size(self, size, quiet):
        with pytest.raises(InvalidConfiguration):
            NetworkSimulator(size, log=quiet)

    def test_population(self, ten_neurons):
        sim = ten_neurons
        assert len(sim.neurons) == 10
        assert sim.current_time == 0
        assert sim.learning_rate == 0.01
        assert sim.thresholds[0] == 1.0
        assert sim.thresholds[1] == pytest.approx(1.1)
        assert sim.leak_rates[0] == pytest.approx(0.1)
        assert all(n.refractory_period == 5 for n in sim.neurons)

    def test_reproducible_weights(self, quiet):
        a = NetworkSimulator(20, log=quiet)
        b = NetworkSimulator(20, log=quiet)
        np.testing.assert_array_equal(a.synapses.weights, b.synapses.weights)

    def test_explicit_seed(self, quiet):
        a = NetworkSimulator(20, config=NetworkConfig(seed=1), log=quiet)
        b = NetworkSimulator(20, config=NetworkConfig(seed=2), log=quiet)
        assert not np.array_equal(a.synapses.weights, b.synapses.weights)

    def test_large_networks_use_edge_arrays(self, quiet):
        sim = NetworkSimulator(15, config=NetworkConfig(sparse_threshold=10), log=quiet)
        assert isinstance(sim.synapses, EdgeSynapticMatrix)

    def test_injected_logger(self):
        out = io.StringIO()
        NetworkSimulator(5, log=get_logger("test", out=out, stdout=False))
        text = out.getvalue()
        assert "lifnet:test INFO" in text
        assert "Built network: 5 neurons" in text


# ---------------------------------------------------------------------------
# Stepping
# ---------------------------------------------------------------------------

class TestStep:
    def test_rates_read_before_stepping(self, two_neurons):
        sim = two_neurons
        spiked = sim.step([5.0, 0.0])
        assert spiked.tolist() == [True, False]
        # Neuron 0's spike is not seen by neuron 1 in the same tick
        assert sim.neurons[1].membrane_potential == 0.0

        sim.step([0.0, 0.0])
        # rate_0 over 10 ticks = 100 Hz; 0.5 * 100 * 0.01
        assert sim.neurons[1].membrane_potential == pytest.approx(0.5)

    def test_no_recurrence_in_input_mode(self, two_neurons):
        sim = two_neurons
        sim.step([5.0, 0.0], recurrent=False)
        sim.step([0.0, 0.0], recurrent=False)
        assert sim.neurons[1].membrane_potential == 0.0

    def test_clock_advances(self, ten_neurons):
        ten_neurons.step(np.zeros(10))
        ten_neurons.step(np.zeros(10))
        assert ten_neurons.current_time == 2

    def test_input_shape_checked(self, ten_neurons):
        with pytest.raises(ValueError):
            ten_neurons.step(np.zeros(3))

    def test_firing_rates_reject_zero_window(self, ten_neurons):
        with pytest.raises(InvalidWindow):
            ten_neurons.firing_rates(0)


# ---------------------------------------------------------------------------
# generate_spikes
# ---------------------------------------------------------------------------

class TestGenerateSpikes:
    def test_empty_run(self, ten_neurons):
        trace = ten_neurons.generate_spikes(0)
        assert len(trace) == 0
        assert ten_neurons.current_time == 0

    def test_negative_length(self, ten_neurons):
        with pytest.raises(InvalidConfiguration):
            ten_neurons.generate_spikes(-1)

    def test_ten_neurons_thirty_ticks(self, ten_neurons):
        trace = ten_neurons.generate_spikes(30)
        assert len(trace) == 30
        assert np.all((trace >= 0.0) & (trace <= 1.0))
        assert np.any(trace > 0.0)
        assert ten_neurons.current_time == 30

    def test_values_are_spike_fractions(self, ten_neurons):
        trace = ten_neurons.generate_spikes(30)
        np.testing.assert_allclose(trace * 10, np.round(trace * 10))

    def test_invariants_after_long_run(self, quiet):
        sim = NetworkSimulator(30, log=quiet)
        for _ in range(5):
            sim.generate_spikes(200)
            for n in sim.neurons:
                assert len(n.spike_history) <= 100
                if n.refractory_counter > 0:
                    assert n.membrane_potential == 0.0

    def test_deterministic(self, quiet):
        a = NetworkSimulator(20, log=quiet).generate_spikes(60)
        b = NetworkSimulator(20, log=quiet).generate_spikes(60)
        np.testing.assert_array_equal(a, b)

    def test_edge_layout_reproduces_dense_run(self, quiet):
        dense = NetworkSimulator(20, log=quiet)
        sparse = NetworkSimulator(20, config=NetworkConfig(sparse_threshold=10), log=quiet)
        np.testing.assert_allclose(dense.generate_spikes(60), sparse.generate_spikes(60))


# ---------------------------------------------------------------------------
# process_input
# ---------------------------------------------------------------------------

class TestProcessInput:
    def test_truncates_to_hundred_samples(self, ten_neurons):
        result = ten_neurons.process_input([1.0] * 150)
        assert isinstance(result, ProcessingResult)
        assert len(result.trace) == 100
        assert ten_neurons.current_time == 100

    def test_result_fields(self, ten_neurons):
        result = ten_neurons.process_input([1.0] * 40)
        assert result.average_activation == pytest.approx(result.trace.mean())
        assert result.average_activation > 0.0
        assert isinstance(result.label, PatternLabel)
        assert result.learning_delta == pytest.approx(0.01 * result.average_activation)
        assert result.pattern_id == "pattern_0"
        assert result.neuron_count == 10
        assert result.network_state.startswith("Active neurons: ")

        data = result.as_dict()
        assert data["label"] == result.label.value
        assert len(data["trace"]) == 40

    def test_learning_applied(self, ten_neurons):
        sim = ten_neurons
        before = sim.synapses.copy_weights()
        connected = sim.synapses.connection_mask()
        result = sim.process_input([1.0] * 40)

        # Strong drive: every neuron fires well above 1 Hz
        assert result.n_updated == connected.sum()
        expected = before + connected * (0.01 * result.average_activation * 0.1)
        np.testing.assert_allclose(sim.synapses.weights, expected)

    def test_silent_input(self, ten_neurons):
        before = ten_neurons.synapses.copy_weights()
        result = ten_neurons.process_input(np.zeros(20))
        assert np.all(result.trace == 0.0)
        assert result.label == PatternLabel.MINIMAL_RESPONSE
        assert result.n_updated == 0
        np.testing.assert_array_equal(ten_neurons.synapses.weights, before)

    def test_empty_input(self, ten_neurons):
        with pytest.raises(EmptyTrace):
            ten_neurons.process_input([])
        assert ten_neurons.current_time == 0

    def test_second_run_continues_clock(self, ten_neurons):
        ten_neurons.process_input([0.5] * 10)
        result = ten_neurons.process_input([0.5] * 10)
        assert result.pattern_id == "pattern_10"


# ---------------------------------------------------------------------------
# Stats, learning, reset
# ---------------------------------------------------------------------------

class TestStats:
    def test_fresh_network(self, ten_neurons):
        stats = ten_neurons.network_stats()
        assert isinstance(stats, NetworkStats)
        assert stats.neuron_count == 10
        assert stats.connection_count == ten_neurons.synapses.n_connections
        assert stats.average_threshold == pytest.approx(ten_neurons.thresholds.mean())
        assert stats.recent_activity_hz == 0.0

    def test_activity_after_run(self, ten_neurons):
        ten_neurons.process_input([1.0] * 30)
        assert ten_neurons.network_stats().recent_activity_hz > 0.0

    def test_summary(self, ten_neurons):
        s = ten_neurons.summary()
        assert "Neurons: 10" in s
        assert "Avg Threshold:" in s

    def test_weights_bounded_after_repeated_learning(self, ten_neurons):
        ten_neurons.process_input([1.0] * 30)
        for _ in range(200):
            ten_neurons.apply_learning(50.0)
        assert np.all(np.abs(ten_neurons.synapses.weights) <= 1.0)

    def test_reset_state_keeps_weights(self, ten_neurons):
        ten_neurons.generate_spikes(30)
        weights = ten_neurons.synapses.copy_weights()
        ten_neurons.reset_state()
        assert ten_neurons.current_time == 0
        assert all(n.n_spikes == 0 for n in ten_neurons.neurons)
        np.testing.assert_array_equal(ten_neurons.synapses.weights, weights)
