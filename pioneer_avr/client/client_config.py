# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver client configuration.

Provides a general config object shared by the transport, the client and
the web interface.
"""

from __future__ import annotations

import os
import json

from ..internal_types import *
from ..exceptions import PioneerAvrError
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    RESPONSE_TIMEOUT,
    CONNECT_TIMEOUT,
    CONNECT_RETRY_INTERVAL,
    WEB_TIMEOUT,
    DEFAULT_MODEL_NAME,
  )
from ..pkg_logging import logger
from ..protocol import ReceiverModel, models

def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "y", "on")
    return bool(value)

class PioneerAvrClientConfig:
    """Pioneer receiver client configuration."""
    default_host: Optional[str]
    default_port: int
    timeout_secs: float
    response_timeout_secs: float
    connect_timeout_secs: float
    connect_retry_interval_secs: float
    model: ReceiverModel
    web_probe: bool
    web_timeout_secs: float

    def __init__(
            self,
            default_host: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            timeout_secs: Optional[float]=None,
            response_timeout_secs: Optional[float]=None,
            connect_timeout_secs: Optional[float]=None,
            connect_retry_interval_secs: Optional[float]=None,
            model: Optional[Union[ReceiverModel, str]]=None,
            web_probe: Optional[bool]=None,
            web_timeout_secs: Optional[float]=None,
            base_config: Optional[PioneerAvrClientConfig]=None,
            use_config_file: bool=True,
          ) -> None:
        """Creates a configuration for a Pioneer receiver client.

           Args:
             default_host: The default hostname or IPV4 address of the receiver.
                   May optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, the default host will be taken from the
                     PIONEER_AVR_HOST environment variable.
             default_port: The default TCP/IP port number to use.
                    If None, the default port will be taken from PIONEER_AVR_PORT.
                    If that environment variable is not found, the default
                    telnet port (23) will be used.
             timeout_secs:
                   The timeout for writes to the receiver, in seconds.
             response_timeout_secs:
                   How long to wait for the one response line to a command,
                   in seconds. When exceeded, the exchange fails with
                   ResponseTimeoutError and the transport is shut down.
             connect_timeout_secs:
                    The timeout for connecting to the receiver, in seconds.
             connect_retry_interval_secs:
                    The interval between connection attempts, in seconds.
                    Connection retry is necessary because some receivers
                    only allow a few simultaneous telnet sessions.
             model:
                   The receiver model (or model name), which determines the
                   input ids probed during discovery.
             web_probe:
                   If True, the client probes the receiver's web interface once
                   at startup and, if it answers, actuates power and input
                   changes through it.
             web_timeout_secs:
                   The timeout for web interface requests, in seconds.
             base_config:
                     An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults(use_config_file=use_config_file)
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if timeout_secs is not None:
            self.timeout_secs = timeout_secs

        if response_timeout_secs is not None:
            self.response_timeout_secs = response_timeout_secs

        if connect_timeout_secs is not None:
            self.connect_timeout_secs = connect_timeout_secs

        if connect_retry_interval_secs is not None:
            self.connect_retry_interval_secs = connect_retry_interval_secs

        if model is not None:
            self.model = self.resolve_model(model)

        if web_probe is not None:
            self.web_probe = web_probe

        if web_timeout_secs is not None:
            self.web_timeout_secs = web_timeout_secs

    @staticmethod
    def resolve_model(model: Union[ReceiverModel, str]) -> ReceiverModel:
        """Returns the ReceiverModel for a model or model name."""
        if isinstance(model, str):
            if not model in models:
                raise PioneerAvrError(f"Unknown Pioneer receiver model: {model}")
            return models[model]
        assert isinstance(model, ReceiverModel)
        return model

    def init_from_defaults(self, use_config_file: bool=True) -> None:
        """Initializes the configuration from defaults."""
        self.default_host = None
        self.default_port = DEFAULT_PORT
        self.timeout_secs = DEFAULT_TIMEOUT
        self.response_timeout_secs = RESPONSE_TIMEOUT
        self.connect_timeout_secs = CONNECT_TIMEOUT
        self.connect_retry_interval_secs = CONNECT_RETRY_INTERVAL
        self.model = models[DEFAULT_MODEL_NAME]
        self.web_probe = True
        self.web_timeout_secs = WEB_TIMEOUT

        if use_config_file:
            config_file = os.environ.get('PIONEER_AVR_CONFIG_FILE')
            if config_file is not None and config_file != '':
                logger.debug(f"Loading client config from {config_file}")
                with open(config_file, 'r') as f:
                    config_jsonable = json.load(f)
                self.update_from_jsonable(config_jsonable)

        default_host: Optional[str] = os.environ.get('PIONEER_AVR_HOST')
        if default_host is not None and default_host != '':
            self.default_host = default_host
        default_port_str = os.environ.get('PIONEER_AVR_PORT')
        if default_port_str is not None and default_port_str != '':
            self.default_port = int(default_port_str)

    def init_from_base_config(self, base_config: PioneerAvrClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.timeout_secs = base_config.timeout_secs
        self.response_timeout_secs = base_config.response_timeout_secs
        self.connect_timeout_secs = base_config.connect_timeout_secs
        self.connect_retry_interval_secs = base_config.connect_retry_interval_secs
        self.model = base_config.model
        self.web_probe = base_config.web_probe
        self.web_timeout_secs = base_config.web_timeout_secs

    def to_jsonable(self) -> JsonableDict:
        """Returns a JSON-serializable representation of the configuration."""
        result: JsonableDict = dict(
            default_host=self.default_host,
            default_port=self.default_port,
            timeout_secs=self.timeout_secs,
            response_timeout_secs=self.response_timeout_secs,
            connect_timeout_secs=self.connect_timeout_secs,
            connect_retry_interval_secs=self.connect_retry_interval_secs,
            model=self.model.name,
            web_probe=self.web_probe,
            web_timeout_secs=self.web_timeout_secs,
          )
        return result

    def to_json(self) -> str:
        """Returns a JSON representation of the configuration."""
        return json.dumps(self.to_jsonable())

    def update_from_jsonable(self, jsonable: JsonableDict) -> None:
        """Updates the configuration from a JSON-serializable representation.
           Missing or empty values are left unchanged."""
        default_host = jsonable.get('default_host')
        if default_host is not None and default_host != '':
            self.default_host = str(default_host)
        default_port = jsonable.get('default_port')
        if default_port is not None and default_port != '':
            self.default_port = int(default_port)  # type: ignore[arg-type]
        timeout_secs = jsonable.get('timeout_secs')
        if timeout_secs is not None and timeout_secs != '':
            self.timeout_secs = float(timeout_secs)  # type: ignore[arg-type]
        response_timeout_secs = jsonable.get('response_timeout_secs')
        if response_timeout_secs is not None and response_timeout_secs != '':
            self.response_timeout_secs = float(response_timeout_secs)  # type: ignore[arg-type]
        connect_timeout_secs = jsonable.get('connect_timeout_secs')
        if connect_timeout_secs is not None and connect_timeout_secs != '':
            self.connect_timeout_secs = float(connect_timeout_secs)  # type: ignore[arg-type]
        connect_retry_interval_secs = jsonable.get('connect_retry_interval_secs')
        if connect_retry_interval_secs is not None and connect_retry_interval_secs != '':
            self.connect_retry_interval_secs = float(connect_retry_interval_secs)  # type: ignore[arg-type]
        model = jsonable.get('model')
        if model is not None and model != '':
            self.model = self.resolve_model(str(model))
        web_probe = jsonable.get('web_probe')
        if web_probe is not None and web_probe != '':
            self.web_probe = _to_bool(web_probe)
        web_timeout_secs = jsonable.get('web_timeout_secs')
        if web_timeout_secs is not None and web_timeout_secs != '':
            self.web_timeout_secs = float(web_timeout_secs)  # type: ignore[arg-type]

    @classmethod
    def from_jsonable(cls, jsonable: JsonableDict, use_config_file: bool=True) -> 'PioneerAvrClientConfig':
        """Creates a configuration from a JSON-serializable representation."""
        result = cls(use_config_file=use_config_file)
        result.update_from_jsonable(jsonable)
        return result

    @classmethod
    def from_json(cls, json_str: str, use_config_file: bool=True) -> 'PioneerAvrClientConfig':
        """Creates a configuration from a JSON representation."""
        jsonable = json.loads(json_str)
        return cls.from_jsonable(jsonable, use_config_file=use_config_file)

    @classmethod
    def from_config_file(cls, filename: str) -> 'PioneerAvrClientConfig':
        """Creates a configuration from a JSON-serialized config file."""
        with open(filename, 'r') as f:
            jsonable: JsonableDict = json.load(f)

        result = cls.from_jsonable(jsonable, use_config_file=False)
        return result

    def __str__(self) -> str:
        return (
            f"PioneerAvrClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"model={self.model}, "
            f"response_timeout_secs={self.response_timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
