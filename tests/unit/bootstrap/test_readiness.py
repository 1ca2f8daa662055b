"""Unit tests for readiness probes."""

import socket
from unittest.mock import MagicMock, patch

import httpx
import pytest
from orbitctl.bootstrap.config import ServiceAddress
from orbitctl.bootstrap.readiness import (
    DependencyTimeoutError,
    ServerStartupError,
    is_port_open,
    wait_for_http,
    wait_for_port,
)

MYSQL = ServiceAddress(host="mysql", port=3306)
URL = "http://localhost:8070/setup"


def _client(statuses: list[int | Exception]) -> httpx.Client:
    """Create a client whose responses follow the given statuses."""
    remaining = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        outcome = remaining.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, request=request)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestIsPortOpen:
    """Tests for is_port_open."""

    def test_listening_socket(self) -> None:
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        server.listen(1)
        try:
            assert is_port_open("127.0.0.1", server.getsockname()[1]) is True
        finally:
            server.close()

    @patch("orbitctl.bootstrap.readiness.socket.create_connection")
    def test_refused(self, mock_connect: MagicMock) -> None:
        mock_connect.side_effect = ConnectionRefusedError()
        assert is_port_open("mysql", 3306) is False


@patch("orbitctl.bootstrap.readiness.time.sleep")
class TestWaitForPort:
    """Tests for wait_for_port."""

    @patch("orbitctl.bootstrap.readiness.is_port_open", return_value=True)
    def test_ready_immediately(self, _mock_open: MagicMock, mock_sleep: MagicMock) -> None:
        assert wait_for_port(MYSQL, name="MySQL", interval=2.0, max_attempts=5) == 1
        mock_sleep.assert_not_called()

    @patch("orbitctl.bootstrap.readiness.is_port_open")
    def test_retries_at_fixed_interval(
        self, mock_open: MagicMock, mock_sleep: MagicMock
    ) -> None:
        mock_open.side_effect = [False, False, True]

        assert wait_for_port(MYSQL, name="MySQL", interval=2.0, max_attempts=5) == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [2.0, 2.0]

    @patch("orbitctl.bootstrap.readiness.is_port_open", return_value=False)
    def test_gives_up_after_max_attempts(
        self, mock_open: MagicMock, mock_sleep: MagicMock
    ) -> None:
        with pytest.raises(DependencyTimeoutError, match="not reachable after 4 attempts"):
            wait_for_port(MYSQL, name="MySQL", interval=2.0, max_attempts=4)

        assert mock_open.call_count == 4
        assert mock_sleep.call_count == 3
        mock_open.assert_called_with("mysql", 3306)


@patch("orbitctl.bootstrap.readiness.time.sleep")
class TestWaitForHttp:
    """Tests for wait_for_http."""

    def test_ready(self, mock_sleep: MagicMock) -> None:
        with _client([200]) as client:
            assert wait_for_http(URL, interval=5.0, max_attempts=3, client=client) == 1
        mock_sleep.assert_not_called()

    def test_retries_errors_and_bad_status(self, mock_sleep: MagicMock) -> None:
        """Connection errors and non-2xx statuses are retried."""
        statuses: list[int | Exception] = [httpx.ConnectError("refused"), 502, 200]
        with _client(statuses) as client:
            assert wait_for_http(URL, interval=5.0, max_attempts=5, client=client) == 3
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(5.0)

    def test_gives_up(self, mock_sleep: MagicMock) -> None:
        with _client([503, 503]) as client:
            with pytest.raises(ServerStartupError, match="failed to start after 2 attempts"):
                wait_for_http(URL, interval=5.0, max_attempts=2, client=client)

    def test_stops_when_process_exits(self, mock_sleep: MagicMock) -> None:
        """An exited server is reported without further probes."""
        process = MagicMock()
        process.poll.return_value = 1
        process.returncode = 1

        with _client([]) as client:
            with pytest.raises(ServerStartupError, match="exited with code 1"):
                wait_for_http(URL, interval=5.0, max_attempts=3, process=process, client=client)

    def test_does_not_close_given_client(self, mock_sleep: MagicMock) -> None:
        client = _client([200])
        wait_for_http(URL, interval=5.0, max_attempts=1, client=client)
        assert client.is_closed is False
        client.close()
