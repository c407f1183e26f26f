# tests/unit/test_shell.py
import subprocess

import pytest

from svcwatch.errors import BackendError
from svcwatch.shell import POWERSHELL, ps_quote, run_command, run_powershell


def test_run_command_success(monkeypatch):
    def mock_run(*args, **kwargs):
        return subprocess.CompletedProcess(args=args, returncode=0, stdout="Running", stderr="")

    monkeypatch.setattr(subprocess, "run", mock_run)
    assert run_command(["sc", "query"]).stdout == "Running"


def test_run_command_failure(monkeypatch):
    def mock_run(*args, **kwargs):
        raise subprocess.CalledProcessError(1, args, stderr="Access is denied.")

    monkeypatch.setattr(subprocess, "run", mock_run)
    with pytest.raises(BackendError, match="Access is denied"):
        run_command(["systemctl", "restart", "demo-svc"])


def test_run_command_missing_binary(monkeypatch):
    def mock_run(*args, **kwargs):
        raise FileNotFoundError(args[0][0])

    monkeypatch.setattr(subprocess, "run", mock_run)
    with pytest.raises(BackendError, match="'powershell' command was not found"):
        run_command(["powershell", "-Command", "Get-Service"])


def test_run_powershell_wraps_script(mocker):
    mock_run = mocker.patch("subprocess.run")

    run_powershell("Get-Service -Name 'x'", check=False)

    called_args, called_kwargs = mock_run.call_args
    assert called_args[0] == POWERSHELL + ["Get-Service -Name 'x'"]
    assert called_kwargs["check"] is False
    assert called_kwargs["capture_output"] is True


def test_ps_quote():
    assert ps_quote("demo") == "'demo'"
    assert ps_quote("O'Brien") == "'O''Brien'"
