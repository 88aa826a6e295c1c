"""Tests for the subscription management CLI."""

import json
from unittest.mock import patch

import pytest

from core.errors.exceptions import (
    ConnectionError,
    DecodeError,
    OperationCancelledError,
    RemoteError,
    RetryExhaustedError,
)
from nakadi import cli
from nakadi.client import Client

from .conftest import TEST_URL, FakeTransport, json_response, problem_response


@pytest.fixture
def cli_transport():
    return FakeTransport()


@pytest.fixture
def run_cli(cli_transport):
    """Run cli.main with the broker replaced by a FakeTransport."""

    def fake_client(url, options=None):
        return Client(url, options, transport=cli_transport)

    def _run(*argv):
        with patch("nakadi.cli.Client", side_effect=fake_client), \
                patch("nakadi.cli.load_dotenv"):
            return cli.main(list(argv))

    return _run


class TestBuildParser:

    def test_get(self):
        args = cli.build_parser().parse_args(["subscriptions", "get", "abc"])

        assert args.subscription_id == "abc"
        assert args.func is cli.cmd_get

    def test_create_collects_event_types(self):
        args = cli.build_parser().parse_args([
            "--retry",
            "subscriptions", "create",
            "--owning-application", "test-app",
            "--event-type", "a.created",
            "--event-type", "b.created",
            "--read-from", "begin",
        ])

        assert args.retry is True
        assert args.event_types == ["a.created", "b.created"]
        assert args.read_from == "begin"
        assert args.func is cli.cmd_create

    def test_create_requires_owning_application(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["subscriptions", "create"])


@pytest.mark.parametrize(
    "error,code",
    [
        (OperationCancelledError("cancelled"), 130),
        (ConnectionError("unable to request subscriptions"), 2),
        (RetryExhaustedError(ConnectionError("refused"), attempts=3, elapsed=1.0), 2),
        (RemoteError("unable to delete subscription: gone", 404, "gone"), 1),
        (DecodeError("unable to decode response body", 500), 1),
    ],
)
def test_exit_code_for(error, code):
    assert cli.exit_code_for(error) == code


class TestMain:

    def test_no_command_prints_help(self, capsys):
        with patch("nakadi.cli.load_dotenv"):
            assert cli.main([]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_get(self, run_cli, cli_transport, load_test_data, capsys):
        data = load_test_data("subscription.json")
        cli_transport.register("GET", f"{TEST_URL}/subscriptions/{data['id']}", json_response(200, data))

        assert run_cli("subscriptions", "get", data["id"]) == 0

        printed = json.loads(capsys.readouterr().out)
        assert printed["id"] == data["id"]
        assert printed["owning_application"] == "test-app"

    def test_list(self, run_cli, cli_transport, load_test_data, capsys):
        cli_transport.register(
            "GET", f"{TEST_URL}/subscriptions", json_response(200, load_test_data("subscriptions.json"))
        )

        assert run_cli("subscriptions", "list") == 0

        printed = json.loads(capsys.readouterr().out)
        assert [s["owning_application"] for s in printed] == ["test-app", "test-app2"]

    def test_create(self, run_cli, cli_transport, load_test_data, capsys):
        cli_transport.register(
            "POST", f"{TEST_URL}/subscriptions", json_response(201, load_test_data("subscription.json"))
        )

        code = run_cli(
            "subscriptions", "create",
            "--owning-application", "test-app",
            "--event-type", "test-event.data",
        )

        assert code == 0
        sent = json.loads(cli_transport.requests[0].body)
        assert sent == {"owning_application": "test-app", "event_types": ["test-event.data"]}

    def test_delete_not_found(self, run_cli, cli_transport):
        cli_transport.register(
            "DELETE", f"{TEST_URL}/subscriptions/abc", problem_response(404, "not found")
        )

        assert run_cli("subscriptions", "delete", "abc") == 1

    def test_connection_failure(self, run_cli, cli_transport, connection_refused):
        cli_transport.register("GET", f"{TEST_URL}/subscriptions", connection_refused)

        assert run_cli("subscriptions", "list") == 2
        assert len(cli_transport.requests) == 1

    def test_url_flag_overrides_config(self, run_cli, cli_transport):
        cli_transport.register(
            "GET", "http://broker:9090/subscriptions", json_response(200, {"items": []})
        )

        assert run_cli("--url", "http://broker:9090", "subscriptions", "list") == 0
        assert cli_transport.requests[0].url == "http://broker:9090/subscriptions"
