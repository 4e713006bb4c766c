"""Single-neuron LIF engine with an adapting threshold.

Time advances in discrete logical ticks. Each tick leaks potential toward
zero and, outside the refractory window, relaxes the threshold toward its
floor. Spikes come only from stimuli: a stimulus that lifts the potential
to the threshold fires, discharges the membrane to zero and raises the
threshold by a fixed increment.

Both updates are pure transitions on an immutable NeuronState record
(advance_state, apply_stimulus). NeuronEngine holds the current record,
the live EngineConfig and the bounded history buffers.
"""

from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from lifscope.simulation.config import (
    EngineConfig,
    INITIAL_THRESHOLD,
    MAX_DATA_POINTS,
    MAX_SPIKES_DISPLAY,
    REFRACTORY_PERIOD,
    THRESHOLD_INCREMENT,
    TIME_STEP,
)
from lifscope.utils import get_logger

LOG = get_logger("simulation.engine")


# ---------------------------------------------------------------------------
# State records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NeuronState:
    """Scalar state of the neuron at one instant.

    Attributes
    ----------
    time : int
        Logical tick counter.
    potential : float
        Membrane potential, never negative.
    threshold : float
        Firing threshold.
    last_spike_time : int or None
        Time of the most recent spike, None before the first.
    spike_count : int
        Spikes fired since the last reset.
    """
    time: int = 0
    potential: float = 0.0
    threshold: float = INITIAL_THRESHOLD
    last_spike_time: Optional[int] = None
    spike_count: int = 0


@dataclass(frozen=True)
class Sample:
    """One point of the recorded time series."""
    time: int
    potential: float
    threshold: float


@dataclass(frozen=True)
class EngineSnapshot:
    """Everything a renderer reads, frozen at one instant."""
    time: int
    potential: float
    threshold: float
    last_spike_time: Optional[int]
    spike_count: int
    refractory: bool
    spike_times: tuple
    samples: tuple
    display_ceiling: float


class StimulusOutcome(Enum):
    """What a single stimulate() call did."""
    REFRACTORY = "refractory"      # dropped, no state change
    SPIKE = "spike"                # fired and discharged
    ACCUMULATED = "accumulated"    # potential raised below threshold


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------

def refractory_at(state, time=None):
    """True while fewer than REFRACTORY_PERIOD ticks separate `time` from
    the last spike. `time` defaults to the state's own time."""
    if state.last_spike_time is None:
        return False
    if time is None:
        time = state.time
    return time - state.last_spike_time < REFRACTORY_PERIOD


def advance_state(state, config):
    """One tick: advance time, relax threshold unless refractory, leak.

    Steps run in order and each reads the fields written before it.
    """
    time = state.time + TIME_STEP
    threshold = state.threshold
    if not refractory_at(state, time):
        threshold = max(config.min_threshold,
                        threshold - config.threshold_decay_rate)
    potential = max(0.0, state.potential - config.decay_rate * TIME_STEP)
    return replace(state, time=time, threshold=threshold, potential=potential)


def apply_stimulus(state, magnitude):
    """Add `magnitude` to the potential.

    Returns
    -------
    (NeuronState, StimulusOutcome)
        The state after the stimulus and which of the three mutually
        exclusive outcomes occurred. On REFRACTORY the same record is
        returned unchanged.
    """
    if refractory_at(state):
        return state, StimulusOutcome.REFRACTORY

    potential = state.potential + magnitude
    if potential >= state.threshold:
        fired = replace(
            state,
            last_spike_time=state.time,
            threshold=state.threshold + THRESHOLD_INCREMENT,
            spike_count=state.spike_count + 1,
            potential=0.0,
        )
        return fired, StimulusOutcome.SPIKE

    # negative magnitudes cannot drive the membrane below zero
    return replace(state, potential=max(0.0, potential)), StimulusOutcome.ACCUMULATED


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class NeuronEngine:
    """Stateful LIF neuron driven by tick() and stimulate().

    Not re-entrant: one driver calls tick(), stimulate() and reset()
    strictly in sequence. Configuration is read live from `self.config`.

    Parameters
    ----------
    config : EngineConfig, optional
        Tunable rates. A default EngineConfig if None.
    """

    def __init__(self, config=None):
        self.config = config if config is not None else EngineConfig()
        self._state = NeuronState()
        self._spike_times = deque(maxlen=MAX_SPIKES_DISPLAY)
        self._samples = deque(maxlen=MAX_DATA_POINTS)

    def __repr__(self):
        return (f"NeuronEngine(time={self.time}, potential={self.potential:.3f}, "
                f"threshold={self.threshold:.3f}, spikes={self.spike_count})")

    # --- state accessors ---

    @property
    def state(self):
        return self._state

    @property
    def time(self):
        return self._state.time

    @property
    def potential(self):
        return self._state.potential

    @property
    def threshold(self):
        return self._state.threshold

    @property
    def last_spike_time(self):
        return self._state.last_spike_time

    @property
    def spike_count(self):
        return self._state.spike_count

    @property
    def spike_times(self):
        """Most recent spike times, oldest first."""
        return list(self._spike_times)

    @property
    def samples(self):
        """Recorded samples, oldest first."""
        return list(self._samples)

    @property
    def display_ceiling(self):
        """Upper bound of the chart's potential axis."""
        return max(self._state.threshold + 1, 5)

    @property
    def time_since_last_spike(self):
        if self._state.last_spike_time is None:
            return None
        return self._state.time - self._state.last_spike_time

    def is_refractory(self):
        return refractory_at(self._state)

    # --- mutations ---

    def tick(self):
        """Advance one tick and record a sample of the updated state."""
        self._state = advance_state(self._state, self.config)
        self._samples.append(Sample(
            time=self._state.time,
            potential=self._state.potential,
            threshold=self._state.threshold,
        ))
        return self._state

    def stimulate(self, magnitude):
        """Apply a stimulus of `magnitude` (a finite float, already
        filtered by the caller).

        Returns
        -------
        StimulusOutcome
        """
        self._state, outcome = apply_stimulus(self._state, magnitude)
        if outcome is StimulusOutcome.SPIKE:
            self._spike_times.append(self._state.time)
            LOG.debug("Spike %d at t=%d, threshold now %.3f",
                      self._state.spike_count, self._state.time,
                      self._state.threshold)
        return outcome

    def send_spike(self):
        """The primary "send spike" action: stimulate with the configured
        spike magnitude."""
        return self.stimulate(self.config.spike_magnitude)

    def reset(self):
        """Restore the initial state and discard all history. The
        configuration is kept."""
        self._state = NeuronState()
        self._spike_times.clear()
        self._samples.clear()
        LOG.debug("Engine reset")

    def snapshot(self):
        """Immutable view of the full state, buffers included."""
        return EngineSnapshot(
            time=self._state.time,
            potential=self._state.potential,
            threshold=self._state.threshold,
            last_spike_time=self._state.last_spike_time,
            spike_count=self._state.spike_count,
            refractory=self.is_refractory(),
            spike_times=tuple(self._spike_times),
            samples=tuple(self._samples),
            display_ceiling=self.display_ceiling,
        )
