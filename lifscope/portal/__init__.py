"""portal — Interactive neuron explorer.

A Panel application that drives a NeuronEngine from buttons and sliders
and draws its history with Plotly.

Launch with:
    panel serve lifscope/portal/app.py
or in a notebook:
    from lifscope.portal.app import build_portal
    portal = build_portal()
    portal.servable()

Requires: panel >= 1.0, plotly
"""

from .views import (
    build_figure,
    neuron_view,
    POTENTIAL_COLORS,
)
from .app import build_portal
