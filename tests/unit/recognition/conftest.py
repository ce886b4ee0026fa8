"""Fixtures for the reconciliation engine: a manual clock and a recording consumer."""

import pytest

from matilda_scribe.recognition import ScriptedEngine, SessionConfig, SessionController


class FakeTimerHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Manual stand-in for loop.call_later; time moves only via advance()."""

    def __init__(self):
        self.now = 0.0
        self._timers = []

    def call_later(self, delay, callback, *args):
        handle = FakeTimerHandle(self.now + delay, callback, args)
        self._timers.append(handle)
        return handle

    @property
    def pending(self):
        return sum(1 for handle in self._timers if not handle.cancelled)

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self._timers if not h.cancelled and h.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._timers.remove(handle)
            self.now = max(self.now, handle.when)
            handle.callback(*handle.args)
        self.now = target


class Recorder:
    """Collects everything a controller delivers to its consumer."""

    def __init__(self):
        self.batches = []
        self.errors = []
        self.states = []

    def on_data(self, items):
        self.batches.append(items)

    def on_error(self, error):
        self.errors.append(error)

    def on_state(self, listening):
        self.states.append(listening)

    @property
    def items(self):
        return [item for batch in self.batches for item in batch]

    @property
    def committed(self):
        return [item.text for item in self.items if item.is_final]

    @property
    def previews(self):
        return [item.text for item in self.items if not item.is_final]

    def callbacks(self):
        return {"on_data": self.on_data, "on_error": self.on_error, "on_state": self.on_state}


class EngineFactory:
    """Hands out a new ScriptedEngine per run and remembers them all."""

    def __init__(self, **engine_kwargs):
        self.engine_kwargs = engine_kwargs
        self.engines = []

    def __call__(self):
        engine = ScriptedEngine(**self.engine_kwargs)
        self.engines.append(engine)
        return engine

    @property
    def current(self):
        return self.engines[-1]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def engine_factory():
    return EngineFactory()


@pytest.fixture
def make_controller(clock, engine_factory):
    """Build a controller on the manual clock with config overrides."""

    def _make(factory=engine_factory, **overrides):
        config = SessionConfig(**overrides)
        return SessionController(factory, config, call_later=clock.call_later)

    return _make


@pytest.fixture
def engine_factory_cls():
    return EngineFactory
