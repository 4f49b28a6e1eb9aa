from unittest.mock import mock_open, patch

from runtime.runtime_info import RuntimeInfo


def test_has_sysfs_gpio_checks_export_file():
    with patch("runtime.runtime_info.sys.platform", "linux"), \
         patch("runtime.runtime_info.os.path.exists", return_value=True) as exists:
        assert RuntimeInfo.has_sysfs_gpio()

    exists.assert_called_once_with("/sys/class/gpio/export")


def test_no_sysfs_outside_linux():
    with patch("runtime.runtime_info.sys.platform", "win32"):
        assert not RuntimeInfo.has_sysfs_gpio()
        assert not RuntimeInfo.is_beaglebone()


def test_is_beaglebone_reads_device_tree_model():
    model = "TI AM335x BeagleBone Black\x00"
    with patch("runtime.runtime_info.sys.platform", "linux"), \
         patch("builtins.open", mock_open(read_data=model)):
        assert RuntimeInfo.is_beaglebone()


def test_is_beaglebone_false_when_files_missing():
    with patch("runtime.runtime_info.sys.platform", "linux"), \
         patch("builtins.open", side_effect=OSError("missing")):
        assert not RuntimeInfo.is_beaglebone()
