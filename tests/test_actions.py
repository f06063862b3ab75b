"""Tests for guarded process termination (mocked psutil)."""

from unittest.mock import MagicMock, patch

import psutil
import pytest

from portlens.core.actions import terminate_process
from portlens.errors import ProcessActionError, ProcessNotFoundError, ProtectedProcessError


def _proc(name):
    proc = MagicMock()
    proc.name.return_value = name
    return proc


class TestTerminateProcess:
    @patch("portlens.core.actions.psutil.Process")
    def test_success(self, mock_proc_cls):
        proc = _proc("node")
        mock_proc_cls.return_value = proc
        assert terminate_process(4321, timeout=0.1) is True
        proc.terminate.assert_called_once()
        proc.wait.assert_called_once_with(timeout=0.1)

    @patch("portlens.core.actions.psutil.Process")
    def test_protected(self, mock_proc_cls):
        proc = _proc("lsass.exe")
        mock_proc_cls.return_value = proc
        with pytest.raises(ProtectedProcessError) as excinfo:
            terminate_process(600)
        assert excinfo.value.pid == 600
        proc.terminate.assert_not_called()

    @patch("portlens.core.actions.psutil.Process")
    def test_missing(self, mock_proc_cls):
        mock_proc_cls.side_effect = psutil.NoSuchProcess(999)
        with pytest.raises(ProcessNotFoundError):
            terminate_process(999)

    @patch("portlens.core.actions.psutil.Process")
    def test_timeout(self, mock_proc_cls):
        proc = _proc("stubborn")
        proc.wait.side_effect = psutil.TimeoutExpired(0.1, pid=77)
        mock_proc_cls.return_value = proc
        assert terminate_process(77, timeout=0.1) is False

    @patch("portlens.core.actions.psutil.Process")
    def test_exits_before_wait(self, mock_proc_cls):
        proc = _proc("quick")
        proc.terminate.side_effect = psutil.NoSuchProcess(5)
        mock_proc_cls.return_value = proc
        assert terminate_process(5) is True

    @patch("portlens.core.actions.psutil.Process")
    def test_access_denied(self, mock_proc_cls):
        proc = _proc("root-owned")
        proc.terminate.side_effect = psutil.AccessDenied(1)
        mock_proc_cls.return_value = proc
        with pytest.raises(ProcessActionError):
            terminate_process(1)
