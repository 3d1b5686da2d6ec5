"""Best-effort lookup of the local host name."""

import logging
import socket
from collections.abc import Callable
from typing import Any, Optional

logger = logging.getLogger(__name__)


class HostnameResolver:
    """
    Resolve the machine's own network name.

    The name reported by the OS is only returned when it resolves to an
    address (the same check a local-host lookup performs). Any failure gives
    None; nothing is raised to the caller.
    """

    def __init__(
        self,
        get_name: Callable[[], str] = socket.gethostname,
        lookup: Callable[..., Any] = socket.getaddrinfo,
        require_resolvable: bool = True,
    ):
        self.get_name = get_name
        self.lookup = lookup
        self.require_resolvable = require_resolvable

    def resolve(self) -> Optional[str]:
        try:
            name = self.get_name()
        except OSError as e:
            logger.debug("Could not read local host name: %s", e)
            return None

        if not name:
            return None

        if self.require_resolvable:
            try:
                self.lookup(name, None)
            except (OSError, UnicodeError) as e:
                logger.debug("Host name %s does not resolve: %s", name, e)
                return None

        return name


def resolve_local_name() -> Optional[str]:
    """Convenience function: resolve the local host name or return None."""
    return HostnameResolver().resolve()
