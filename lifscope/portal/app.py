"""Assemble the neuron portal.

Usage:
    # In a notebook
    from lifscope.portal.app import build_portal
    portal = build_portal()
    portal.servable()

    # As a standalone app
    panel serve lifscope/portal/app.py --show

    # With a configuration file
    LIFSCOPE_CONFIG=leaky.yaml panel serve lifscope/portal/app.py
"""

import os

import panel as pn

from lifscope.utils import get_logger

LOG = get_logger("portal.app")

DEFAULT_PERIOD_MS = 50


def build_portal(config=None, preset=None, period_ms=DEFAULT_PERIOD_MS,
                 autostart=True):
    """Build the portal application.

    Parameters
    ----------
    config : EngineConfig or path-like, optional
        Engine configuration, or a YAML file to load it from. Falls back
        to the LIFSCOPE_CONFIG environment variable, then to `preset`.
    preset : str, optional
        Name of a CONFIG_PRESETS entry, used when no config is given.
    period_ms : int
        Milliseconds between ticks once the page has loaded.
    autostart : bool
        If True, start ticking when the page loads.

    Returns
    -------
    pn.Column
        The portal, ready for .servable() or .show().
    """
    pn.extension("plotly", sizing_mode="stretch_width")

    from lifscope.portal.views import neuron_view
    from lifscope.simulation.config import EngineConfig, get_preset, load_config
    from lifscope.simulation.driver import Driver
    from lifscope.simulation.engine import NeuronEngine

    if config is None:
        config = os.environ.get("LIFSCOPE_CONFIG")
    if config is None:
        config = get_preset(preset) if preset else EngineConfig()
    elif not isinstance(config, EngineConfig):
        config = load_config(config)

    engine = NeuronEngine(config)
    driver = Driver(engine)
    view = neuron_view(engine=engine, driver=driver)

    if autostart:
        pn.state.onload(lambda: driver.start(period_ms))

    LOG.info("Portal built: %s, tick every %d ms", config, period_ms)
    return view


# --- Standalone entry point ---
if __name__ == "__main__" or __name__.startswith("bokeh"):
    portal = build_portal()
    portal.servable()
