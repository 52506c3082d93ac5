"""Tests for ChristieProjectorInstance."""

import asyncio

import pytest

from christie_projector import (
    ChristieProjectorInstance,
    ConnectionStatus,
    DeviceState,
)
from christie_projector.protocol import action_command_codes
from christie_projector.emulator import ChristieProjectorEmulator


def emulator_config(emulator, password=""):
    return {"host": "127.0.0.1", "port": emulator.bound_port, "password": password}


class TestLifecycle:
    """Tests for init, config_updated and destroy."""

    @pytest.mark.asyncio
    async def test_init_publishes_definitions_and_polls(self, recording_host, wait_until):
        """Test init reports OK, publishes definitions and runs a first poll."""
        async with ChristieProjectorEmulator(port=0, power="00", input="3") as emulator:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
            await instance.init(emulator_config(emulator))
            try:
                assert recording_host.statuses[0] == (ConnectionStatus.OK, None)
                assert "power_on" in recording_host.action_definitions
                assert set(recording_host.feedback_definitions) == {"power_state", "input_source"}
                assert len(recording_host.variable_definitions) == 2

                await wait_until(lambda: len(recording_host.feedback_checks) == 1)
                assert instance.state == DeviceState("00", "3")
                assert recording_host.variable_values == [{"power_state": "Power ON", "input_source": 3}]
                assert recording_host.feedback_checks == [("power_state", "input_source")]
            finally:
                await instance.destroy()

    @pytest.mark.asyncio
    async def test_config_updated_replaces_config_and_poller(self, recording_host, wait_until):
        """Test a config change restarts polling against the new projector."""
        async with ChristieProjectorEmulator(port=0, power="80", input="1") as first, \
                ChristieProjectorEmulator(port=0, power="00", input="4") as second:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
            await instance.init(emulator_config(first))
            try:
                await wait_until(lambda: instance.state == DeviceState("80", "1"))
                old_poller = instance.poller

                await instance.config_updated(emulator_config(second))
                assert instance.config.port == second.bound_port
                assert instance.poller is not old_poller
                assert not old_poller.is_running
                await wait_until(lambda: instance.state == DeviceState("00", "4"))
            finally:
                await instance.destroy()

    @pytest.mark.asyncio
    async def test_bad_config_keeps_previous(self, recording_host):
        """Test a malformed configuration is reported and ignored."""
        instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
        await instance.init({"host": "10.0.0.5", "port": 10000})
        try:
            await instance.config_updated({"host": "10.0.0.6", "port": "not-a-port"})
            assert instance.config.host == "10.0.0.5"
            assert recording_host.statuses[-1][0] == ConnectionStatus.BAD_CONFIG
            assert recording_host.logs[-1][0] == "error"
        finally:
            await instance.destroy()

    @pytest.mark.asyncio
    async def test_bad_config_at_init_not_reported_ok(self, recording_host):
        """Test a rejected initial configuration leaves the status at bad_config."""
        instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
        await instance.init({"host": "10.0.0.5", "port": "not-a-port"})
        try:
            assert [status for status, message in recording_host.statuses] == [ConnectionStatus.BAD_CONFIG]
            assert not instance.config.has_host
            assert recording_host.action_definitions is not None
        finally:
            await instance.destroy()

    @pytest.mark.asyncio
    async def test_destroy_closes_polls_from_replaced_config(self, recording_host, wait_until):
        """Test destroy closes a poll still in flight from before a config change."""
        opened = []
        closed = []

        async def silent(reader, writer):
            opened.append(writer)
            try:
                await reader.read()
            except ConnectionError:
                pass
            closed.append(writer)
            writer.close()

        server = await asyncio.start_server(silent, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
            await instance.init({"host": "127.0.0.1", "port": port})
            await wait_until(lambda: len(opened) == 1)
            await instance.config_updated({"host": "127.0.0.1", "port": port})
            await wait_until(lambda: len(opened) == 2)

            await asyncio.wait_for(instance.destroy(), 2.0)
            await wait_until(lambda: len(closed) == 2)
            assert recording_host.feedback_checks == []
        finally:
            for writer in opened:
                writer.close()
            server.close()
            await server.wait_closed()

    @pytest.mark.asyncio
    async def test_destroy_closes_everything(self, recording_host):
        """Test destroy stops polling and aborts the open command session."""
        async def silent(reader, writer):
            try:
                await reader.read()
            except ConnectionError:
                pass
            writer.close()

        server = await asyncio.start_server(silent, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
            await instance.init({"host": "127.0.0.1", "port": port})
            session = await instance.execute_action("power_on")
            poller = instance.poller
            await asyncio.wait_for(instance.destroy(), 2.0)
            assert session.destroyed
            assert not poller.is_running
            assert instance.session is None
            assert instance.poller is None
        finally:
            server.close()
            await server.wait_closed()


class TestActions:
    """Tests for executing actions."""

    @pytest.mark.asyncio
    async def test_power_on_scenario(self, recording_host):
        """Test power_on writes the empty password and C00 after the prompts."""
        async with ChristieProjectorEmulator(port=0) as emulator:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600, linger_secs=0.05)
            await instance.init(emulator_config(emulator))
            instance.poller.destroy()
            try:
                session = await instance.execute_action("power_on")
                await asyncio.wait_for(session.wait(), 5.0)
                assert session.writes == [b"\r", b"C00\r"]
                assert emulator.commands == ["C00"]
                assert emulator.power == "00"
            finally:
                await instance.destroy()

    @pytest.mark.asyncio
    async def test_each_action_sends_its_code_once(self, recording_host):
        """Test every action results in exactly one write of its command code."""
        async with ChristieProjectorEmulator(port=0, password="secret") as emulator:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600, linger_secs=0.01)
            await instance.init(emulator_config(emulator, password="secret"))
            instance.poller.destroy()
            try:
                for action_id, code in action_command_codes.items():
                    session = await instance.execute_action({"action": action_id})
                    await asyncio.wait_for(session.wait(), 5.0)
                    assert session.writes == [b"secret\r", (code + "\r").encode()]
            finally:
                await instance.destroy()
        assert emulator.commands == list(action_command_codes.values())

    @pytest.mark.asyncio
    async def test_unknown_action_is_ignored(self, recording_host):
        """Test an unknown action opens no connection and reports no error."""
        async with ChristieProjectorEmulator(port=0) as emulator:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
            await instance.init(emulator_config(emulator))
            instance.poller.destroy()
            try:
                assert await instance.execute_action("unknown_action") is None
                assert await instance.execute_action({}) is None
                assert instance.session is None
                assert recording_host.logs == []
            finally:
                await instance.destroy()
        assert emulator.commands == []

    @pytest.mark.asyncio
    async def test_host_not_configured(self, recording_host):
        """Test a command without a host is logged as an error and not sent."""
        instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
        await instance.init({})
        try:
            assert instance.send_command("ABC") is None
            assert recording_host.logs == [("error", "Host not configured")]
        finally:
            await instance.destroy()

    @pytest.mark.asyncio
    async def test_network_error_reported(self, recording_host, closed_port, wait_until):
        """Test a connect failure is logged and reported as a status change."""
        instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
        await instance.init({"host": "127.0.0.1", "port": closed_port})
        instance.poller.destroy()
        try:
            session = await instance.execute_action("power_off")
            with pytest.raises(OSError):
                await asyncio.wait_for(session.wait(), 5.0)
            await wait_until(lambda: recording_host.statuses[-1][0] == ConnectionStatus.CONNECTION_FAILURE)
            assert recording_host.logs[-1][0] == "error"
            assert recording_host.logs[-1][1].startswith("Network error: ")
            assert instance.session is None
        finally:
            await instance.destroy()

    @pytest.mark.asyncio
    async def test_new_command_replaces_open_session(self, recording_host):
        """Test starting a command destroys the previous command session."""
        async with ChristieProjectorEmulator(port=0) as emulator:
            instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600, linger_secs=10.0)
            await instance.init(emulator_config(emulator))
            instance.poller.destroy()
            try:
                first = await instance.execute_action("input_1")
                second = await instance.execute_action("input_2")
                assert first.destroyed
                assert instance.session is second
                await asyncio.wait_for(first.wait(), 2.0)
            finally:
                await instance.destroy()


class TestStateAndFeedbacks:
    """Tests for the cached device state and feedback evaluation."""

    def test_handle_status_updates_cache_and_host(self, recording_host):
        """Test a completed poll updates the cache and requests one feedback check."""
        instance = ChristieProjectorInstance(recording_host)
        instance.handle_status(DeviceState("00", "3"))
        assert instance.state == DeviceState("00", "3")
        assert recording_host.variable_values == [{"power_state": "Power ON", "input_source": 3}]
        assert recording_host.feedback_checks == [("power_state", "input_source")]

    def test_unknown_power_token_passes_through(self, recording_host):
        instance = ChristieProjectorInstance(recording_host)
        instance.handle_status(DeviceState("9F", "A"))
        assert recording_host.variable_values == [{"power_state": "9F", "input_source": "A"}]

    @pytest.mark.asyncio
    async def test_failed_poll_leaves_cache(self, recording_host, closed_port):
        """Test a poll that fails does not touch the cache or request feedback checks."""
        instance = ChristieProjectorInstance(recording_host, poll_interval_secs=3600)
        instance.state = DeviceState("00", "3")
        await instance.init({"host": "127.0.0.1", "port": closed_port})
        try:
            assert await asyncio.wait_for(instance.poller.poll_once(), 5.0) is None
            assert instance.state == DeviceState("00", "3")
            assert recording_host.feedback_checks == []
            assert recording_host.variable_values == []
        finally:
            await instance.destroy()

    def test_check_feedback(self, recording_host):
        instance = ChristieProjectorInstance(recording_host)
        assert not instance.check_feedback("power_state", {"state": "00"})
        instance.handle_status(DeviceState("00", "3"))
        assert instance.check_feedback("power_state", {"state": "00"})
        assert not instance.check_feedback("power_state", {"state": "80"})
        assert instance.check_feedback("input_source", {"input": "3"})
        assert instance.check_feedback("input_source", {"input": 3})
        assert not instance.check_feedback("input_source", {"input": "1"})
        assert not instance.check_feedback("lamp_hours", {})

    def test_config_field_schema(self, recording_host):
        instance = ChristieProjectorInstance(recording_host)
        assert [f["id"] for f in instance.get_config_fields()] == ["host", "port", "password"]
