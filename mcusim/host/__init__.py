"""Host-side adapters: JSON session and TCP server."""

from mcusim.host.session import HostSession

__all__ = ["HostSession"]
