"""Controls and chart for the neuron portal.

build_figure() renders an engine's history as a Plotly figure and is
usable on its own. neuron_view() wires Panel widgets to an engine and a
Driver: buttons and the custom-magnitude box stimulate, sliders write the
live EngineConfig, and every tick or action redraws the chart.
"""

import numpy as np

try:
    import panel as pn
    HAS_PANEL = True
except ImportError:
    HAS_PANEL = False

try:
    import plotly.graph_objects as go
    HAS_PLOTLY = True
except ImportError:
    HAS_PLOTLY = False

from lifscope.simulation.analysis import samples_frame, readout_lines
from lifscope.simulation.config import CONTROL_RANGES
from lifscope.utils import get_logger

LOG = get_logger("portal.views")

POTENTIAL_COLORS = ["#8884d8", "#82ca9d", "#ffc658", "#ff7300", "#0088fe"]
THRESHOLD_COLOR = "#82ca9d"
SPIKE_COLOR = "red"

SLIDER_LABELS = {
    "decay_rate": "Decay Rate",
    "threshold_decay_rate": "Threshold Decay Rate",
    "min_threshold": "Min Threshold",
    "spike_magnitude": "Spike Magnitude",
}


def _require_panel():
    if not HAS_PANEL:
        raise ImportError(
            "Panel is required for the portal. Install with: pip install panel"
        )


def _require_plotly():
    if not HAS_PLOTLY:
        raise ImportError(
            "Plotly is required for the chart. Install with: pip install plotly"
        )


# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------

def _sqrt_axis(ceiling, n_ticks=6):
    """Tick positions and labels for a square-root potential axis."""
    ticks = np.linspace(0.0, ceiling, n_ticks)
    return np.sqrt(ticks), [f"{t:.2g}" for t in ticks]


def build_figure(engine, show_potential=True, show_threshold=True,
                 sqrt_scale=False, potential_color=POTENTIAL_COLORS[0]):
    """Render the engine's recorded history.

    Parameters
    ----------
    engine : NeuronEngine
        Source of samples, spike times and the display ceiling.
    show_potential, show_threshold : bool
        Which lines to draw.
    sqrt_scale : bool
        Compress the potential axis with a square root.
    potential_color : str
        Colour of the potential line.

    Returns
    -------
    go.Figure
        One line per shown quantity and one vertical marker per retained
        spike time, labelled "Spike 1", "Spike 2", ...
    """
    _require_plotly()

    df = samples_frame(engine)
    ceiling = engine.display_ceiling
    scale = np.sqrt if sqrt_scale else (lambda y: y)

    fig = go.Figure()
    if show_potential:
        fig.add_trace(go.Scatter(
            x=df["time"], y=scale(df["potential"].to_numpy()),
            mode="lines", name="potential",
            line=dict(color=potential_color, width=2),
        ))
    if show_threshold:
        fig.add_trace(go.Scatter(
            x=df["time"], y=scale(df["threshold"].to_numpy()),
            mode="lines", name="threshold",
            line=dict(color=THRESHOLD_COLOR, width=2, dash="dash"),
        ))

    for i, spike_time in enumerate(engine.spike_times):
        fig.add_vline(
            x=spike_time, line_color=SPIKE_COLOR, line_width=1,
            annotation_text=f"Spike {i + 1}", annotation_position="top",
        )

    yaxis = dict(title="Potential", range=[0, scale(ceiling)])
    if sqrt_scale:
        tickvals, ticktext = _sqrt_axis(ceiling)
        yaxis.update(tickvals=tickvals, ticktext=ticktext)

    xaxis = dict(title="Time", tickformat="d")
    if len(df) > 0:
        xaxis["range"] = [int(df["time"].min()), int(df["time"].max())]

    fig.update_layout(
        xaxis=xaxis,
        yaxis=yaxis,
        template="plotly_dark",
        paper_bgcolor="#0d1117",
        plot_bgcolor="#0d1117",
        height=400,
        margin=dict(t=30, r=30, l=20, b=5),
        showlegend=True,
    )
    return fig


# ---------------------------------------------------------------------------
# Interactive view
# ---------------------------------------------------------------------------

def neuron_view(engine=None, driver=None):
    """Build the interactive neuron tab.

    Parameters
    ----------
    engine : NeuronEngine, optional
        Engine to drive. A fresh default engine if None.
    driver : Driver, optional
        Scheduler for the engine. A new running Driver if None. The view
        registers a redraw listener but does not start the driver.
        The engine config is clamped into the slider ranges.

    Returns
    -------
    pn.Column
    """
    _require_panel()
    _require_plotly()

    from lifscope.simulation.driver import Driver
    from lifscope.simulation.engine import NeuronEngine
    from lifscope.simulation.stimulus import send_custom_spike

    if engine is None:
        engine = NeuronEngine()
    if driver is None:
        driver = Driver(engine)

    # --- Widgets ---
    spike_button = pn.widgets.Button(name="Send Spike", button_type="primary")
    run_button = pn.widgets.Button(
        name="Pause" if driver.running else "Resume", button_type="default",
    )
    reset_button = pn.widgets.Button(name="Reset", button_type="warning")
    count_md = pn.pane.Markdown("", styles={"color": "#c9d1d9"})

    start_config = engine.config.clamp_to_controls()
    engine.config.update(**start_config.to_dict())
    sliders = {}
    for key, label in SLIDER_LABELS.items():
        lo, hi, step = CONTROL_RANGES[key]
        sliders[key] = pn.widgets.FloatSlider(
            name=label, start=lo, end=hi, step=step,
            value=getattr(start_config, key),
            format="0.000" if step < 0.1 else "0.00",
        )

    show_threshold = pn.widgets.Checkbox(name="Show Threshold", value=True)
    show_potential = pn.widgets.Checkbox(name="Show Membrane Potential", value=True)
    sqrt_scale = pn.widgets.Checkbox(name="Square-root Scale", value=False)

    custom_input = pn.widgets.TextInput(
        name="Custom spike magnitude", placeholder="Custom spike magnitude",
    )
    custom_button = pn.widgets.Button(name="Send Custom Spike")
    color_select = pn.widgets.Select(
        name="Potential Color", options=POTENTIAL_COLORS,
        value=POTENTIAL_COLORS[0],
    )

    chart_pane = pn.pane.Plotly(build_figure(engine), sizing_mode="stretch_width")
    readout_md = pn.pane.Markdown("", styles={"color": "#c9d1d9"})

    # --- Redraw ---
    def _refresh(*_):
        refractory = engine.is_refractory()
        spike_button.name = "Refractory..." if refractory else "Send Spike"
        spike_button.disabled = refractory
        run_button.name = "Pause" if driver.running else "Resume"
        count_md.object = f"Total Spikes Sent: {engine.spike_count}"
        chart_pane.object = build_figure(
            engine,
            show_potential=show_potential.value,
            show_threshold=show_threshold.value,
            sqrt_scale=sqrt_scale.value,
            potential_color=color_select.value,
        )
        readout_md.object = "\n\n".join(readout_lines(engine))

    driver.add_listener(_refresh)

    # --- Actions ---
    def _send_spike(event):
        engine.send_spike()
        _refresh()

    def _toggle_running(event):
        driver.toggle()
        _refresh()

    def _reset(event):
        driver.reset()

    def _send_custom(event):
        outcome = send_custom_spike(engine, custom_input.value)
        if outcome is not None:
            custom_input.value = ""
        _refresh()

    def _config_setter(key):
        def _set(event):
            engine.config.update(**{key: event.new})
        return _set

    spike_button.on_click(_send_spike)
    run_button.on_click(_toggle_running)
    reset_button.on_click(_reset)
    custom_button.on_click(_send_custom)
    for key, slider in sliders.items():
        slider.param.watch(_config_setter(key), "value")
    for widget in (show_threshold, show_potential, sqrt_scale, color_select):
        widget.param.watch(_refresh, "value")

    _refresh()

    return pn.Column(
        pn.pane.Markdown("# Neuron Simulator", styles={"color": "#c9d1d9"}),
        pn.Row(spike_button, run_button, reset_button, count_md),
        *sliders.values(),
        pn.Row(show_threshold, show_potential, sqrt_scale),
        pn.Row(custom_input, custom_button),
        color_select,
        chart_pane,
        readout_md,
        sizing_mode="stretch_width",
    )
