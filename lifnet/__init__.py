"""lifnet — a small recurrent Leaky-Integrate-and-Fire network.

Simulates a population of heterogeneous LIF neurons with sparse,
distance-biased recurrent coupling, windowed firing-rate estimation,
a coincidence-based Hebbian rule and a statistical classifier over the
population-activity trace.

Subpackages:
    simulation  Neurons, synapses, network runs, plasticity, analysis
    utils       Print-based logging
"""

__version__ = "1.0.0"

from .errors import LifnetError, InvalidConfiguration, InvalidWindow, EmptyTrace
from .config import NetworkConfig, load_config
