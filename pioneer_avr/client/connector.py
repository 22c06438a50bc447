# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver client abstract transport connector interface.

Objects that can create connected transports to a Pioneer receiver. The
abstraction lets tests and proxies supply their own transports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..internal_types import *
from .client_transport import PioneerAvrClientTransport

class PioneerAvrConnector(ABC):
    """Abstract base class for Pioneer receiver client transport connectors."""

    @abstractmethod
    async def connect(self) -> PioneerAvrClientTransport:
        """Create and connect a client transport for the receiver associated
           with this connector.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()
