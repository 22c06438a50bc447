# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import json

import pytest

from pioneer_avr import (
    DEFAULT_PORT,
    PioneerAvrClientConfig,
    PioneerAvrError,
    models,
    resolve_receiver_tcp_host,
  )

def test_defaults():
    config = PioneerAvrClientConfig()
    assert config.default_host is None
    assert config.default_port == DEFAULT_PORT == 23
    assert config.response_timeout_secs == 5.0
    assert config.model is models['VSX-1120K']
    assert config.web_probe is True

def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv('PIONEER_AVR_HOST', 'avr.local')
    monkeypatch.setenv('PIONEER_AVR_PORT', '8102')
    config = PioneerAvrClientConfig()
    assert config.default_host == 'avr.local'
    assert config.default_port == 8102

def test_config_file(monkeypatch, tmp_path):
    config_file = tmp_path / 'pioneer.json'
    config_file.write_text(json.dumps(dict(default_host='10.0.0.5', web_probe='false', response_timeout_secs=1.5)))
    monkeypatch.setenv('PIONEER_AVR_CONFIG_FILE', str(config_file))
    config = PioneerAvrClientConfig()
    assert config.default_host == '10.0.0.5'
    assert config.web_probe is False
    assert config.response_timeout_secs == 1.5
    assert PioneerAvrClientConfig(use_config_file=False).default_host is None

def test_explicit_arguments_and_base_config():
    base = PioneerAvrClientConfig('10.0.0.5', default_port=8102, web_probe=False)
    derived = PioneerAvrClientConfig(response_timeout_secs=0.5, base_config=base)
    assert derived.default_host == '10.0.0.5'
    assert derived.default_port == 8102
    assert derived.web_probe is False
    assert derived.response_timeout_secs == 0.5
    assert base.response_timeout_secs == 5.0

def test_json_round_trip_uses_model_name():
    config = PioneerAvrClientConfig('10.0.0.5', model='VSX-1120K')
    jsonable = json.loads(config.to_json())
    assert jsonable['model'] == 'VSX-1120K'
    restored = PioneerAvrClientConfig.from_jsonable(jsonable)
    assert restored.to_jsonable() == config.to_jsonable()

def test_unknown_model_is_rejected():
    with pytest.raises(PioneerAvrError):
        PioneerAvrClientConfig(model='VSX-0000')

@pytest.mark.parametrize("host,expected", [
    ("avr.local", ("avr.local", 23)),
    ("avr.local:8102", ("avr.local", 8102)),
    ("tcp://10.0.0.5", ("10.0.0.5", 23)),
    ("tcp://10.0.0.5:8102", ("10.0.0.5", 8102)),
  ])
def test_resolve_host(host, expected):
    assert resolve_receiver_tcp_host(host) == expected

@pytest.mark.parametrize("host", ["http://avr.local", "avr.local:telnet", ":23"])
def test_resolve_host_rejects_bad_hosts(host):
    with pytest.raises(PioneerAvrError):
        resolve_receiver_tcp_host(host)

def test_resolve_host_requires_a_host():
    with pytest.raises(PioneerAvrError):
        resolve_receiver_tcp_host()
