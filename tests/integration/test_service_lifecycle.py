# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Integration tests for running and stopping the service on a real socket.
"""

import asyncio
import io
import json
import logging
import socket
import sys

import aiohttp
import pytest

from slackauth.exceptions import ServerError, ServiceStateError
from slackauth.logging_config import JSONFormatter
from slackauth.service import ServiceState, SlackAuthService


async def wait_until_listening(service, timeout=5.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not service.addresses:
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("service did not start listening")
        await asyncio.sleep(0.01)
    return service.addresses[0]


@pytest.mark.asyncio
async def test_serve_until_shutdown(service_config, fake_exchanger):
    service_config.addr = "127.0.0.1:0"
    service = SlackAuthService(service_config, exchanger=fake_exchanger)
    assert service.state is ServiceState.CONSTRUCTED

    auths = []
    service.on_auth(auths.append)
    server = asyncio.create_task(service.serve())
    host, port = await wait_until_listening(service)

    assert service.state is ServiceState.RUNNING

    async with aiohttp.ClientSession() as session:
        async with session.get(f"http://{host}:{port}/auth", params={"code": "bar"}) as resp:
            assert resp.status == 200
        async with session.get(f"http://{host}:{port}/") as resp:
            assert resp.status == 200

    await service.notifier.join()
    await service.shutdown()
    await asyncio.wait_for(server, timeout=5.0)

    assert service.state is ServiceState.TERMINATED
    assert service.addresses == []
    assert [auth.access_token for auth in auths] == ["xoxp-bar"]


@pytest.mark.asyncio
async def test_bind_failure_is_fatal(service_config, fake_exchanger):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        service_config.addr = f"127.0.0.1:{busy.getsockname()[1]}"
        service = SlackAuthService(service_config, exchanger=fake_exchanger)

        with pytest.raises(ServerError):
            await service.serve()

    assert service.state is ServiceState.TERMINATED


@pytest.mark.asyncio
async def test_terminated_service_cannot_restart(service_config, fake_exchanger):
    service_config.addr = "127.0.0.1:0"
    service = SlackAuthService(service_config, exchanger=fake_exchanger)

    server = asyncio.create_task(service.serve())
    await wait_until_listening(service)
    await service.shutdown()
    await asyncio.wait_for(server, timeout=5.0)

    with pytest.raises(ServiceStateError):
        await service.serve()


@pytest.mark.asyncio
async def test_missing_tls_files_are_fatal(service_config, fake_exchanger, tmp_path):
    service_config.addr = "127.0.0.1:0"
    service_config.cert_file = str(tmp_path / "cert.pem")
    service_config.key_file = str(tmp_path / "key.pem")
    service = SlackAuthService(service_config, exchanger=fake_exchanger)

    with pytest.raises(ServerError):
        await service.serve()

    assert service.state is ServiceState.TERMINATED


class TestSetLogOutput:
    """Log output follows the configured format unless a stream is given."""

    def test_default_output_is_text_on_stdout(self, service_config, fake_exchanger, restore_root_logger):
        service_config.debug = False
        service = SlackAuthService(service_config, exchanger=fake_exchanger)

        service.set_log_output()

        (handler,) = restore_root_logger.handlers
        assert handler.stream is sys.stdout
        assert not isinstance(handler.formatter, JSONFormatter)
        assert restore_root_logger.level == logging.INFO

    def test_configured_json_format_is_used_on_stdout(self, service_config, fake_exchanger, restore_root_logger):
        service_config.log_format = "json"
        service = SlackAuthService(service_config, exchanger=fake_exchanger)

        service.set_log_output()

        (handler,) = restore_root_logger.handlers
        assert handler.stream is sys.stdout
        assert isinstance(handler.formatter, JSONFormatter)
        assert restore_root_logger.level == logging.DEBUG

    def test_stream_receives_json_lines(self, service_config, fake_exchanger, restore_root_logger):
        stream = io.StringIO()
        service = SlackAuthService(service_config, exchanger=fake_exchanger)

        service.set_log_output(stream)
        logging.getLogger("slackauth.test").info("hello", extra={"team_id": "T12345ABCDE"})

        record = json.loads(stream.getvalue().splitlines()[-1])
        assert record["message"] == "hello"
        assert record["team_id"] == "T12345ABCDE"
