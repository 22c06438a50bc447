# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import httpx
import pytest

from pioneer_avr import PioneerAvrWebInterface, TransportError

def mock_receiver(status_code=200, event_status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path == '/StatusHandler.asp':
            return httpx.Response(status_code, text="{}")
        if request.url.path == '/EventHandler.asp':
            return httpx.Response(event_status_code)
        return httpx.Response(404)
    return httpx.MockTransport(handler)

async def test_probe_enables_web_interface_on_200():
    web = PioneerAvrWebInterface('192.168.1.50', http_transport=mock_receiver(200))
    assert await web.probe() is True
    assert web.enabled and web.probed

async def test_probe_leaves_web_interface_disabled_on_error_status():
    web = PioneerAvrWebInterface('192.168.1.50', http_transport=mock_receiver(404))
    assert await web.probe() is False
    assert not web.enabled
    assert web.probed

async def test_probe_connection_failure_does_not_raise():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)
    web = PioneerAvrWebInterface('192.168.1.50', http_transport=httpx.MockTransport(handler))
    assert await web.probe() is False
    assert not web.enabled

async def test_send_event_targets_event_handler():
    seen = []
    web = PioneerAvrWebInterface('192.168.1.50', http_transport=mock_receiver(seen=seen))
    await web.send_event('25FN')
    assert len(seen) == 1
    url = seen[0].url
    assert url.host == '192.168.1.50'
    assert url.path == '/EventHandler.asp'
    assert url.params['WebToHostItem'] == '25FN'

async def test_send_event_failure_raises_transport_error():
    web = PioneerAvrWebInterface('192.168.1.50', http_transport=mock_receiver(event_status_code=500))
    with pytest.raises(TransportError):
        await web.send_event('PO')
