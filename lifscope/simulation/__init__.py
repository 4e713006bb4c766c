"""simulation — Single-neuron LIF engine with an adapting threshold.

Pure-Python implementation of a leaky integrate-and-fire neuron advanced
in discrete logical ticks, plus its configuration, schedulers and
read-only analysis helpers.
"""

from .config import (
    EngineConfig,
    CONFIG_PRESETS,
    CONTROL_RANGES,
    INITIAL_THRESHOLD,
    MAX_DATA_POINTS,
    MAX_SPIKES_DISPLAY,
    REFRACTORY_PERIOD,
    THRESHOLD_INCREMENT,
    TIME_STEP,
    get_preset,
    load_config,
    dump_config,
)
from .engine import (
    NeuronEngine,
    NeuronState,
    Sample,
    EngineSnapshot,
    StimulusOutcome,
    advance_state,
    apply_stimulus,
    refractory_at,
)
from .stimulus import parse_magnitude, send_custom_spike
from .driver import Driver, run_protocol
from .analysis import (
    samples_frame,
    spike_frame,
    interspike_intervals,
    summary,
    readout_lines,
)
