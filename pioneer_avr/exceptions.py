#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from typing import Optional

class PioneerAvrError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class TransportError(PioneerAvrError):
  """The connection to the receiver was lost, or a command/response exchange failed.

  Once raised by a transport, the transport is shut down and every later
  exchange fails the same way.
  """
  pass

class ResponseTimeoutError(TransportError):
  """The receiver did not answer a command within the response timeout."""
  pass

class ProtocolError(PioneerAvrError):
  """The receiver answered with a response line that could not be classified."""
  response: Optional[str]

  def __init__(self, msg: str, response: Optional[str]=None):
    super().__init__(msg)
    self.response = response
