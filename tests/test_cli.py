"""
Tests for the fortiapi-cmd and fortiapi-login tools
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from fortiapi.cli import cmd, login
from fortiapi.cli.common import INSECURE_WARNING
from fortiapi.communication.echo import NullEcho
from fortiapi.logging import PACKAGE_LOGGER
from fortiapi.session import Client

from conftest import FakeTransport, json_response, status_result


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop the stderr handler a tool run attaches to the package logger"""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def client_factory(fake_transport):
    """Builds real Clients on top of the fake transport, remembering their configs"""
    configs = []

    def build(config):
        configs.append(config)
        return Client(config, transport=fake_transport, echo=NullEcho())

    build.configs = configs
    return build


class TestCmd:

    @pytest.fixture(autouse=True)
    def patch_client(self, client_factory):
        with patch('fortiapi.cli.cmd.Client', side_effect=client_factory):
            yield

    def test_simple_get(self, fake_transport):
        code = cmd.main(["--hostname", "fmg.test", "--session", "tok", "-m", "get", "-u", "sys/status"], environ={})

        assert code == 0
        assert fake_transport.methods == [("get", "sys/status"), ("get", "sys/status")]

    def test_environment_defaults(self, fake_transport, client_factory):
        environ = {"FORTINET_HOSTNAME": "fmg.env", "FORTINET_SESSION": "tok", "FORTINET_ID": "30"}

        code = cmd.main(["-m", "get", "-u", "sys/status"], environ=environ)

        assert code == 0
        assert client_factory.configs[0].hostname == "fmg.env"
        assert [b["id"] for b in fake_transport.bodies] == [30, 31]

    def test_option_overrides_environment(self, client_factory):
        environ = {"FORTINET_HOSTNAME": "fmg.env", "FORTINET_SESSION": "tok"}

        cmd.main(["--hostname", "fmg.opt", "-m", "get", "-u", "sys/status"], environ=environ)

        assert client_factory.configs[0].hostname == "fmg.opt"

    def test_credentials_in_environment_ignored(self, client_factory):
        environ = {
            "FORTINET_HOSTNAME": "fmg.env", "FORTINET_SESSION": "tok",
            "FORTINET_USERNAME": "admin", "FORTINET_PASSWORD": "secret"
        }

        cmd.main(["-m", "get", "-u", "sys/status"], environ=environ)

        assert client_factory.configs[0].username is None

    def test_json_url_array(self, fake_transport):
        code = cmd.main(
            ["--hostname", "h", "--session", "s", "-m", "get", "-u", '["a", "b"]'],
            environ={}
        )

        assert code == 0
        assert fake_transport.bodies[-1]["params"] == [{"url": "a"}, {"url": "b"}]

    def test_params_and_data(self, fake_transport):
        cmd.main([
            "--hostname", "h", "--session", "s", "-m", "set",
            "-p", '{"url": "obj/address"}', "-d", '{"name": "honeydew"}'
        ], environ={})

        assert fake_transport.bodies[-1]["params"] == [{"url": "obj/address", "data": [{"name": "honeydew"}]}]

    def test_invalid_data_json(self, fake_transport, capsys):
        code = cmd.main(["--hostname", "h", "--session", "s", "-m", "set", "-u", "x", "-d", "{bad"], environ={})

        assert code == 1
        assert "JSON parse failed for supplied data block" in capsys.readouterr().err
        assert fake_transport.bodies == []

    def test_requires_session(self, fake_transport, capsys):
        code = cmd.main(["--hostname", "h", "-m", "get", "-u", "sys/status"], environ={})

        assert code == 1
        assert "session ID" in capsys.readouterr().err
        assert fake_transport.bodies == []

    def test_mismatched_arrays(self, capsys):
        code = cmd.main(
            ["--hostname", "h", "--session", "s", "-m", "delete", "-u", '["a", "b"]', "-d", "[{}]"],
            environ={}
        )

        assert code == 1
        assert "consistent type" in capsys.readouterr().err

    def test_status_output(self, capsys):
        cmd.main(["--hostname", "h", "--session", "s", "-m", "get", "-u", "sys/status", "--status"], environ={})

        out = capsys.readouterr().out
        assert out.startswith("# Fortinet API status:")
        assert json.loads(out.split("\n", 1)[1])["code"] == 0

    def test_failure_exit_code(self, fake_transport, capsys):
        fake_transport.queue(
            json_response([status_result("sys/status")]),
            json_response([status_result("obj/x", code=-3, message="Object does not exist")])
        )

        code = cmd.main(["--hostname", "h", "--session", "s", "-m", "delete", "-u", "obj/x"], environ={})

        assert code == 1
        assert "Object does not exist" in capsys.readouterr().err

    def test_insecure_from_environment_warns(self, client_factory, capsys):
        environ = {"FORTINET_HOSTNAME": "h", "FORTINET_SESSION": "s", "FORTINET_INSECURE": "1"}

        cmd.main(["-m", "get", "-u", "sys/status"], environ=environ)

        assert INSECURE_WARNING in capsys.readouterr().err
        assert client_factory.configs[0].insecure is True

    def test_debug_log_tagged_with_hostname(self, capsys):
        cmd.main(["--hostname", "fmg.test", "--session", "tok", "--debug", "-m", "get", "-u", "sys/status"], environ={})

        lines = [line for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
        entries = [json.loads(line) for line in lines]

        assert {entry["hostname"] for entry in entries} == {"fmg.test"}
        assert any(entry["logger"] == "fortiapi.cli.cmd" for entry in entries)

    def test_log_config_file_used(self, tmp_path, capsys):
        path = tmp_path / "logging.yaml"
        path.write_text("version: 1\ndisable_existing_loggers: false\n")

        code = cmd.main(
            ["--hostname", "h", "--session", "s", "--log-config", str(path), "-m", "get", "-u", "sys/status"],
            environ={}
        )

        assert code == 0
        assert logging.getLogger(PACKAGE_LOGGER).handlers == []

    def test_explicit_insecure_no_warning(self, client_factory, capsys):
        environ = {"FORTINET_HOSTNAME": "h", "FORTINET_SESSION": "s", "FORTINET_INSECURE": "1"}

        cmd.main(["--insecure", "-m", "get", "-u", "sys/status"], environ=environ)

        assert INSECURE_WARNING not in capsys.readouterr().err


class TestLogin:

    @pytest.fixture(autouse=True)
    def patch_client(self, client_factory, fake_transport):
        fake_transport.queue(json_response([status_result("sys/login/user")], session="fresh"))
        with patch('fortiapi.cli.login.Client', side_effect=client_factory):
            yield

    @pytest.fixture
    def run(self):
        with patch('fortiapi.cli.login.subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            yield mock_run

    def test_autoexec_gets_session_environment(self, run, fake_transport):
        environ = {"FORTINET_USERNAME": "admin", "FORTINET_PASSWORD": "secret", "PATH": "/bin"}

        code = login.main(["--hostname", "fmg.test", "--autoexec", "env"], environ=environ)

        assert code == 0
        args, kwargs = run.call_args
        assert args[0] == "env"
        assert kwargs["shell"] is True

        env = kwargs["env"]
        assert env["FORTINET_HOSTNAME"] == "fmg.test"
        assert env["FORTINET_SESSION"] == "fresh"
        assert env["FORTINET_ID"] == "2"
        assert env["FORTINET_ECHO"] == "unset"
        assert env["PATH"] == "/bin"
        assert "FORTINET_USERNAME" not in env
        assert "FORTINET_PASSWORD" not in env
        assert "FORTINET_INSECURE" not in env

    def test_logout_after_child_exits(self, run, fake_transport):
        login.main(["--hostname", "h", "--username", "u", "--password", "p", "--autoexec", "true"], environ={})

        assert fake_transport.methods == [("exec", "sys/login/user"), ("exec", "sys/logout")]
        assert fake_transport.bodies[-1]["session"] == "fresh"

    def test_interactive_shell(self, run, capsys):
        environ = {"SHELL": "/bin/zsh"}

        login.main(["--hostname", "h", "--username", "u", "--password", "p", "--verbose"], environ=environ)

        assert run.call_args.args[0] == ["/bin/zsh"]
        out = capsys.readouterr().out
        assert "Login successful with session fresh" in out
        assert "Logging out..." in out

    def test_insecure_exported(self, run):
        login.main(["--hostname", "h", "--username", "u", "--password", "p", "--insecure", "--autoexec", "true"], environ={})

        assert run.call_args.kwargs["env"]["FORTINET_INSECURE"] == "1"

    def test_stale_environment_session_not_used(self, run, fake_transport):
        environ = {"FORTINET_SESSION": "old", "FORTINET_ID": "50"}

        login.main(["--hostname", "h", "--username", "u", "--password", "p", "--autoexec", "true"], environ=environ)

        assert fake_transport.bodies[0]["id"] == 1
        assert "session" not in fake_transport.bodies[0]

    def test_child_exit_code_returned(self, run):
        run.return_value = MagicMock(returncode=3)

        code = login.main(["--hostname", "h", "--username", "u", "--password", "p", "--autoexec", "false"], environ={})

        assert code == 3

    def test_missing_credentials(self, run, capsys):
        code = login.main(["--hostname", "h", "--username", "u"], environ={})

        assert code == 1
        assert "username and password" in capsys.readouterr().err
        run.assert_not_called()
