"""Interface abstractions for the simulator.

- ScriptRunner: contract for script execution engines
"""

from mcusim.interfaces.runner import ScriptRunner

__all__ = ["ScriptRunner"]
