"""Clock port + implementations."""
from secret_config.clock.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
