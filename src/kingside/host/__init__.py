"""Qt host: runs computer searches off the GUI thread and drives the clock."""

from kingside.host.clock_driver import ClockDriver
from kingside.host.engine_session import EngineSession

__all__ = ["ClockDriver", "EngineSession"]
