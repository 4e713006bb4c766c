"""Tests for read-only engine views and boundary input filtering."""

import math

import numpy as np
import pytest

from lifscope.simulation.analysis import (
    interspike_intervals,
    readout_lines,
    samples_frame,
    spike_frame,
    summary,
)
from lifscope.simulation.driver import run_protocol
from lifscope.simulation.engine import NeuronEngine, StimulusOutcome
from lifscope.simulation.stimulus import parse_magnitude, send_custom_spike


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def engine():
    return NeuronEngine()


@pytest.fixture
def three_spike_engine():
    """Spikes at t=2, 10 and 25, then run to t=40."""
    eng = NeuronEngine()
    run_protocol(eng, 40, stimuli={2: 3.0, 10: 3.0, 25: 3.0})
    return eng


# ---------------------------------------------------------------------------
# DataFrame views
# ---------------------------------------------------------------------------

class TestFrames:
    def test_empty_samples_frame(self, engine):
        df = samples_frame(engine)
        assert list(df.columns) == ["time", "potential", "threshold"]
        assert len(df) == 0

    def test_samples_frame_matches_buffer(self, three_spike_engine):
        df = samples_frame(three_spike_engine)
        assert len(df) == 40
        assert df["time"].dtype == np.int64
        last = three_spike_engine.samples[-1]
        assert df.iloc[-1]["threshold"] == pytest.approx(last.threshold)
        assert (df["potential"] >= 0).all()

    def test_spike_frame_labels(self, three_spike_engine):
        df = spike_frame(three_spike_engine)
        assert list(df.index) == ["Spike 1", "Spike 2", "Spike 3"]
        assert list(df["time"]) == [2, 10, 25]

    def test_interspike_intervals(self, three_spike_engine):
        assert list(interspike_intervals(three_spike_engine)) == [8, 15]

    def test_no_intervals_without_spikes(self, engine):
        assert len(interspike_intervals(engine)) == 0


# ---------------------------------------------------------------------------
# Readouts
# ---------------------------------------------------------------------------

class TestReadouts:
    def test_summary(self, three_spike_engine):
        s = summary(three_spike_engine)
        assert s["time"] == 40
        assert s["spike_count"] == 3
        assert s["time_since_last_spike"] == 15
        assert s["refractory"] is False
        assert s["mean_isi"] == pytest.approx(11.5)
        assert s["display_ceiling"] == 5
        assert s["n_samples"] == 40

    def test_summary_mean_isi_nan(self, engine):
        assert math.isnan(summary(engine)["mean_isi"])

    def test_readout_before_spikes(self, engine):
        engine.stimulate(0.5)
        lines = readout_lines(engine)
        assert lines == [
            "Membrane Potential: 0.50",
            "Threshold: 1.00",
            "Time: 0",
            "No spikes yet",
        ]

    def test_readout_after_spike(self, three_spike_engine):
        assert readout_lines(three_spike_engine)[-1] == "Time since last spike: 15"


# ---------------------------------------------------------------------------
# Input filtering
# ---------------------------------------------------------------------------

class TestParseMagnitude:
    @pytest.mark.parametrize("text, expected", [
        ("0.7", 0.7),
        ("  -1.25 ", -1.25),
        ("3", 3.0),
        ("1e-1", 0.1),
        (0.4, 0.4),
    ])
    def test_valid(self, text, expected):
        assert parse_magnitude(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", [
        None, "", "   ", "abc", "1.2.3", "nan", "inf", "-Infinity",
    ])
    def test_discarded(self, text):
        assert parse_magnitude(text) is None


class TestSendCustomSpike:
    def test_valid_input_stimulates(self, engine):
        assert send_custom_spike(engine, "1.5") is StimulusOutcome.SPIKE
        assert engine.spike_count == 1

    def test_invalid_input_never_reaches_engine(self, engine):
        before = engine.snapshot()
        assert send_custom_spike(engine, "spike!") is None
        assert engine.snapshot() == before

    def test_custom_spike_respects_refractory(self, engine):
        send_custom_spike(engine, "2")
        assert send_custom_spike(engine, "2") is StimulusOutcome.REFRACTORY
        assert engine.spike_count == 1
