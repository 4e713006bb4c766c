"""lifscope — an interactive leaky integrate-and-fire neuron.

A single LIF neuron with an adapting threshold and a refractory period,
advanced one logical tick at a time and driven by user stimuli.

Subpackages:
    simulation    Engine, configuration, driver and analysis
    portal        Panel controls and Plotly time-series chart
    utils         Print-based logging
"""

__version__ = "0.1.0"
