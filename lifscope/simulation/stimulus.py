"""Input filtering for user-entered stimulus magnitudes.

The engine assumes every magnitude it receives is a finite float. Text
from a control surface is filtered here: anything that does not parse to
a finite number is discarded and the engine is never called.
"""

import math

from lifscope.utils import get_logger

LOG = get_logger("simulation.stimulus")


def parse_magnitude(text):
    """Parse a stimulus magnitude.

    Parameters
    ----------
    text : str, float or None
        Raw user input.

    Returns
    -------
    float or None
        The magnitude, or None if the input is empty, not a number,
        NaN or infinite.
    """
    if text is None:
        return None
    if isinstance(text, str):
        text = text.strip()
        if not text:
            return None
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def send_custom_spike(engine, text):
    """Stimulate `engine` with a user-entered magnitude.

    Returns
    -------
    StimulusOutcome or None
        None when the input was discarded.
    """
    magnitude = parse_magnitude(text)
    if magnitude is None:
        LOG.debug("Discarded stimulus input %r", text)
        return None
    return engine.stimulate(magnitude)
