# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import asyncio

import pytest

from pioneer_avr import ProtocolError, TransportError, ResponseTimeoutError, ResponseKind
from pioneer_avr.client import CommandDispatcher

async def test_commands_are_sent_one_at_a_time_in_submission_order(fake_transport_class, classifier):
    transport = fake_transport_class(
        {'?P': 'PWR0', '?F': 'FN22', '?V': 'VOL050', '?M': 'MUT1'},
        delay=0.01)
    dispatcher = CommandDispatcher(transport, classifier)
    try:
        results = await asyncio.gather(
            dispatcher.execute('?P'),
            dispatcher.execute('?F'),
            dispatcher.execute('?V'),
            dispatcher.execute('?M'),
          )
    finally:
        await dispatcher.aclose()
    assert transport.sent == ['?P', '?F', '?V', '?M']
    assert transport.max_in_exchange == 1
    assert [r.kind for r in results] == [
        ResponseKind.POWER, ResponseKind.INPUT, ResponseKind.VOLUME, ResponseKind.MUTE]
    assert classifier.state.power is True
    assert classifier.state.volume == 50

async def test_send_returns_raw_response(fake_transport_class, classifier):
    dispatcher = CommandDispatcher(fake_transport_class({'?P': 'PWR1'}), classifier)
    try:
        assert await dispatcher.send('?P') == 'PWR1'
    finally:
        await dispatcher.aclose()

async def test_unrecognized_response_fails_only_that_command(fake_transport_class, classifier):
    dispatcher = CommandDispatcher(fake_transport_class({'ZZ': 'E04', '?P': 'PWR0'}), classifier)
    try:
        with pytest.raises(ProtocolError) as exc_info:
            await dispatcher.execute('ZZ')
        assert exc_info.value.response == 'E04'
        result = await dispatcher.execute('?P')
        assert result.value is True
    finally:
        await dispatcher.aclose()

async def test_transport_errors_are_propagated(fake_transport_class, classifier):
    transport = fake_transport_class({'PO': OSError("boom")})
    dispatcher = CommandDispatcher(transport, classifier)
    try:
        with pytest.raises(ResponseTimeoutError):
            await dispatcher.execute('?P')
        with pytest.raises(TransportError) as exc_info:
            await dispatcher.execute('PO')
        assert isinstance(exc_info.value.__cause__, OSError)
    finally:
        await dispatcher.aclose()

async def test_closed_dispatcher_rejects_commands(fake_transport_class, classifier):
    dispatcher = CommandDispatcher(fake_transport_class({'?P': 'PWR0'}), classifier)
    await dispatcher.execute('?P')
    await dispatcher.aclose()
    assert dispatcher.is_closed
    with pytest.raises(TransportError):
        await dispatcher.execute('?P')

async def test_close_fails_queued_requests(fake_transport_class, classifier):
    transport = fake_transport_class({'?P': 'PWR0', '?F': 'FN22'}, delay=0.05)
    dispatcher = CommandDispatcher(transport, classifier)
    first = asyncio.ensure_future(dispatcher.execute('?P'))
    second = asyncio.ensure_future(dispatcher.execute('?F'))
    # let the worker pick up the first request
    await asyncio.sleep(0.01)
    await dispatcher.aclose()
    assert (await first).value is True
    with pytest.raises(TransportError):
        await second
    assert transport.sent == ['?P']

async def test_cancelled_request_is_not_sent(fake_transport_class, classifier):
    transport = fake_transport_class({'?P': 'PWR0', '?F': 'FN22', '?V': 'VOL010'}, delay=0.02)
    dispatcher = CommandDispatcher(transport, classifier)
    try:
        first = asyncio.ensure_future(dispatcher.execute('?P'))
        second = asyncio.ensure_future(dispatcher.execute('?F'))
        await asyncio.sleep(0.005)
        second.cancel()
        third = await dispatcher.execute('?V')
        await first
        assert third.value == 10
        assert transport.sent == ['?P', '?V']
    finally:
        await dispatcher.aclose()
