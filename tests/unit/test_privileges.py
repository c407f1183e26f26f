# tests/unit/test_privileges.py
import pytest
from pytest_mock import MockerFixture

from svcwatch import privileges
from svcwatch.errors import PrivilegeError


def test_posix_root_is_elevated(mocker: MockerFixture):
    mocker.patch("svcwatch.paths.is_windows", return_value=False)
    mocker.patch("os.geteuid", return_value=0, create=True)
    assert privileges.is_elevated() is True


def test_posix_user_is_not_elevated(mocker: MockerFixture):
    mocker.patch("svcwatch.paths.is_windows", return_value=False)
    mocker.patch("os.geteuid", return_value=1000, create=True)
    assert privileges.is_elevated() is False

    with pytest.raises(PrivilegeError, match="root"):
        privileges.require_elevated()


def test_windows_admin_check(mocker: MockerFixture):
    mocker.patch("svcwatch.paths.is_windows", return_value=True)
    windll = mocker.Mock()
    windll.shell32.IsUserAnAdmin.return_value = 1
    mocker.patch("ctypes.windll", windll, create=True)

    assert privileges.is_elevated() is True
