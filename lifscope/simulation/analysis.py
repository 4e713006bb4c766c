"""Read-only views of a NeuronEngine for display and inspection.

Functions here turn the engine's buffers into pandas/numpy structures
and format the text readouts shown next to the chart. None of them
mutate the engine.
"""

import numpy as np
import pandas as pd

SAMPLE_COLUMNS = ["time", "potential", "threshold"]


def samples_frame(engine):
    """Recorded samples as a DataFrame.

    Returns
    -------
    pd.DataFrame
        Columns: time (int), potential, threshold. One row per sample,
        oldest first. Empty (with the same columns) before the first tick.
    """
    samples = engine.samples
    if not samples:
        return pd.DataFrame({
            "time": pd.Series(dtype=np.int64),
            "potential": pd.Series(dtype=np.float64),
            "threshold": pd.Series(dtype=np.float64),
        })
    return pd.DataFrame({
        "time": np.array([s.time for s in samples], dtype=np.int64),
        "potential": np.array([s.potential for s in samples], dtype=np.float64),
        "threshold": np.array([s.threshold for s in samples], dtype=np.float64),
    })


def spike_frame(engine):
    """Retained spike times, labelled the way the chart labels them.

    Returns
    -------
    pd.DataFrame
        Index 'label' ("Spike 1", "Spike 2", ...), column 'time'.
    """
    times = engine.spike_times
    labels = [f"Spike {i + 1}" for i in range(len(times))]
    return pd.DataFrame(
        {"time": np.array(times, dtype=np.int64)},
        index=pd.Index(labels, name="label"),
    )


def interspike_intervals(engine):
    """Ticks between consecutive retained spikes."""
    return np.diff(np.array(engine.spike_times, dtype=np.int64))


def summary(engine):
    """Scalar readouts of the current state.

    Returns
    -------
    dict
        time, potential, threshold, spike_count, refractory,
        time_since_last_spike, display_ceiling, mean_isi (NaN with
        fewer than two retained spikes), n_samples.
    """
    isi = interspike_intervals(engine)
    return {
        "time": engine.time,
        "potential": engine.potential,
        "threshold": engine.threshold,
        "spike_count": engine.spike_count,
        "refractory": engine.is_refractory(),
        "time_since_last_spike": engine.time_since_last_spike,
        "display_ceiling": engine.display_ceiling,
        "mean_isi": float(isi.mean()) if len(isi) > 0 else float("nan"),
        "n_samples": len(engine.samples),
    }


def readout_lines(engine):
    """Text readouts displayed under the chart."""
    since = engine.time_since_last_spike
    return [
        f"Membrane Potential: {engine.potential:.2f}",
        f"Threshold: {engine.threshold:.2f}",
        f"Time: {engine.time}",
        f"Time since last spike: {since}" if since is not None else "No spikes yet",
    ]
