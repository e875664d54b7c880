"""Interface abstractions for the simulator.

Defines behavioral contracts that modules and the engine rely on:
- Combinational: the settle() pass
- Clocked: the clock_edge() commit
- IClock: cycle counter delivering edges to subscribers
"""

from rtlsim.interfaces.clock import Clocked, Combinational, IClock

__all__ = [
    "Clocked",
    "Combinational",
    "IClock",
]
