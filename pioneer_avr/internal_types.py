# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Type hints used internally by this package.

Intended to be imported with "from .internal_types import *".
"""

from __future__ import annotations

from typing import (
    Dict,
    List,
    Optional,
    Type,
    Union,
    Any,
    Tuple,
    Set,
    Callable,
    Awaitable,
    Coroutine,
    Iterable,
    Iterator,
    AsyncIterator,
    Mapping,
    MutableMapping,
    Sequence,
    AsyncContextManager,
    TYPE_CHECKING,
    cast,
  )

from types import TracebackType

Jsonable = Union[List['Jsonable'], Mapping[str, 'Jsonable'], str, int, float, bool, None]
"""A type hint for a simple JSON-serializable value; i.e., str, int, float, bool, None, Dict[str, Jsonable], List[Jsonable]"""

JsonableDict = Dict[str, Jsonable]
"""A type hint for a simple JSON-serializable dict; i.e., Dict[str, Jsonable]"""

HostAndPort = Tuple[str, int]
"""A tuple of (hostname, port)"""
