"""Tests for the device launcher."""

from unittest.mock import patch

import pytest

from callprep.integrations.device import DeviceLauncher, dialable_payload


class TestDeviceConfig:
    def test_is_configured_always_true(self):
        """Device launching needs no config."""
        assert DeviceLauncher().is_configured() is True


class TestSoftphoneDetection:
    def test_found_on_path(self):
        launcher = DeviceLauncher()
        with patch("callprep.integrations.device.shutil.which", return_value="/usr/bin/linphone"):
            with patch("callprep.integrations.device.platform.system", return_value="Linux"):
                assert launcher.has_softphone() is True

    def test_not_found(self):
        launcher = DeviceLauncher()
        with patch("callprep.integrations.device.shutil.which", return_value=None):
            with patch("callprep.integrations.device.platform.system", return_value="Linux"):
                assert launcher.has_softphone() is False

    def test_result_is_cached(self):
        launcher = DeviceLauncher()
        launcher._softphone = True
        assert launcher.has_softphone() is True

    def test_health_check_delegates(self):
        launcher = DeviceLauncher()
        launcher._softphone = False
        assert launcher.health_check() is False


class TestOpen:
    def test_opens_uri(self):
        launcher = DeviceLauncher()
        with patch("callprep.integrations.device.webbrowser.open", return_value=True) as mock_open:
            assert launcher.open("tel:+18778406250") is True
        mock_open.assert_called_once_with("tel:+18778406250")

    def test_falls_back_to_clipboard_when_no_handler(self):
        launcher = DeviceLauncher()
        with patch("callprep.integrations.device.webbrowser.open", return_value=False):
            with patch.object(launcher, "_copy_to_clipboard", return_value=True) as mock_copy:
                assert launcher.open("sip:18778406250@acct.mightycall.com") is False
        mock_copy.assert_called_once_with("18778406250")

    def test_falls_back_on_exception(self):
        launcher = DeviceLauncher()
        with patch("callprep.integrations.device.webbrowser.open", side_effect=OSError("fail")):
            with patch.object(launcher, "_copy_to_clipboard", return_value=True) as mock_copy:
                assert launcher.open("tel:+18778406250,,501") is False
        mock_copy.assert_called_once_with("+18778406250,,501")

    def test_empty_uri_returns_false(self):
        launcher = DeviceLauncher()
        with patch("callprep.integrations.device.webbrowser.open") as mock_open:
            assert launcher.open("") is False
        mock_open.assert_not_called()


class TestDialablePayload:
    @pytest.mark.parametrize(
        "uri,expected",
        [
            ("tel:+18778406250", "+18778406250"),
            ("tel:+18778406250,,501", "+18778406250,,501"),
            ("sip:18778406250@acct.mightycall.com", "18778406250"),
            ("https://app.mightycall.com/call?to=18778406250&account=a", "18778406250"),
            ("mailto:someone@example.com", ""),
        ],
    )
    def test_extracts_number(self, uri, expected):
        assert dialable_payload(uri) == expected
