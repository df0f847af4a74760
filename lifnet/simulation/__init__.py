"""simulation — Recurrent LIF network engine.

Pure-numpy implementation of a small recurrent network of
leaky integrate-and-fire neurons with distance-biased sparse coupling,
a coincidence-based Hebbian rule and a trace classifier.
"""

from .random import PseudoRandomSource
from .neuron import LifNeuron, heterogeneous_parameters
from .synapses import (
    SynapticMatrix,
    EdgeSynapticMatrix,
    build_synaptic_matrix,
)
from .stimulus import (
    StimulusProtocol,
    ramp_stimulus,
    sample_stimulus,
)
from .plasticity import HebbianPlasticity
from .analysis import (
    PatternLabel,
    PatternClassifier,
    classify_pattern,
    trace_statistics,
    population_activity,
    active_fraction,
)
from .network import (
    NetworkSimulator,
    NetworkStats,
    ProcessingResult,
)
