"""Schedulers that advance a NeuronEngine.

The engine never schedules itself. A Driver owns the running flag and
decides when tick() is called: manually via step(), or from a Panel
periodic callback standing in for the browser's per-frame redraw.
run_protocol() is a scripted scheduler for experiments and tests.
"""

from lifscope.utils import get_logger

LOG = get_logger("simulation.driver")

DEFAULT_PERIOD_MS = 16  # about one tick per display frame


class Driver:
    """Run/pause control and tick cadence for one engine.

    Parameters
    ----------
    engine : NeuronEngine
        The engine to advance.
    running : bool
        Initial state of the running flag.
    """

    def __init__(self, engine, running=True):
        self.engine = engine
        self.running = running
        self._listeners = []
        self._callback = None

    def add_listener(self, fn):
        """Call fn(engine) after every tick this driver performs."""
        self._listeners.append(fn)
        return fn

    def step(self):
        """Tick once if running. Returns True if a tick happened."""
        if not self.running:
            return False
        self.engine.tick()
        for fn in self._listeners:
            fn(self.engine)
        return True

    def advance(self, n_ticks):
        """Call step() n_ticks times. Returns the number of ticks taken."""
        return sum(self.step() for _ in range(n_ticks))

    def pause(self):
        self.running = False

    def resume(self):
        self.running = True

    def toggle(self):
        self.running = not self.running
        return self.running

    def reset(self):
        """Reset the engine; the running flag is left as it is."""
        self.engine.reset()
        for fn in self._listeners:
            fn(self.engine)

    # --- Panel periodic callback ---

    @property
    def is_attached(self):
        return self._callback is not None

    def start(self, period_ms=DEFAULT_PERIOD_MS):
        """Attach step() to a Panel periodic callback.

        Must be called inside a Panel server session or notebook.
        """
        import panel as pn

        if self._callback is not None:
            self.stop()
        self._callback = pn.state.add_periodic_callback(
            self.step, period=period_ms, start=True,
        )
        LOG.info("Driver started: one tick every %d ms", period_ms)
        return self._callback

    def stop(self):
        """Detach the periodic callback. No tick is in flight to cancel."""
        if self._callback is None:
            return
        self._callback.stop()
        self._callback = None
        LOG.info("Driver stopped at t=%d", self.engine.time)


def run_protocol(engine, n_ticks, stimuli=None):
    """Drive `engine` through a scripted protocol.

    Before each tick, every stimulus scheduled at the engine's current
    time is applied, in order.

    Parameters
    ----------
    engine : NeuronEngine
        Engine to drive; its current state is the starting point.
    n_ticks : int
        Number of ticks to run.
    stimuli : dict, optional
        Maps engine time to a magnitude or a list of magnitudes.

    Returns
    -------
    pd.DataFrame
        The engine's samples after the run (see samples_frame).
    """
    from lifscope.simulation.analysis import samples_frame

    stimuli = stimuli or {}
    n_applied = 0
    for _ in range(n_ticks):
        scheduled = stimuli.get(engine.time, ())
        if not isinstance(scheduled, (list, tuple)):
            scheduled = [scheduled]
        for magnitude in scheduled:
            engine.stimulate(magnitude)
            n_applied += 1
        engine.tick()

    LOG.info("Protocol complete: %d ticks, %d stimuli, %d spikes",
             n_ticks, n_applied, engine.spike_count)
    return samples_frame(engine)
