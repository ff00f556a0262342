"""Unit tests for the environment snapshot provider."""

from __future__ import annotations

import socket
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from hostlog.config.settings import ENVIRONMENT_VARIABLE
from hostlog.inferred import NO_ADDRESS, UNKNOWN, capture_snapshot


def _address(family: int, address: str) -> SimpleNamespace:
    return SimpleNamespace(family=family, address=address)


class TestSnapshotShape:
    """Tests for the five snapshot sections on the real host."""

    def test_sections_present(self) -> None:
        """Test all sections are captured."""
        snapshot = capture_snapshot()

        assert set(snapshot) == {"system", "runtime", "environment", "hardware", "network"}

    def test_system_section(self) -> None:
        """Test system identity fields are strings."""
        system = capture_snapshot("my-host")["system"]

        assert system["hostname"] == "my-host"
        for key in ("platform", "arch", "type", "release", "hostname"):
            assert isinstance(system[key], str)

    def test_runtime_section(self) -> None:
        """Test runtime fields and integer memory breakdown."""
        runtime = capture_snapshot()["runtime"]

        assert isinstance(runtime["python_version"], str)
        assert isinstance(runtime["pid"], int)
        assert isinstance(runtime["uptime"], int)
        assert runtime["uptime"] >= 0
        assert set(runtime["memory"]) == {
            "rss",
            "vms",
            "heap_used",
            "heap_peak",
            "allocated_blocks",
        }
        assert all(isinstance(value, int) for value in runtime["memory"].values())

    def test_hardware_section(self) -> None:
        """Test hardware fields are typed."""
        hardware = capture_snapshot()["hardware"]

        assert isinstance(hardware["cpu_cores"], int)
        assert hardware["cpu_cores"] >= 1
        assert isinstance(hardware["cpu_model"], str)
        assert isinstance(hardware["total_memory"], int)
        assert isinstance(hardware["free_memory"], int)

    def test_network_section(self) -> None:
        """Test addresses are a non-empty list and primary is the first."""
        network = capture_snapshot()["network"]

        assert isinstance(network["ip_addresses"], list)
        assert network["ip_addresses"]
        assert network["primary_ip"] == network["ip_addresses"][0]


class TestEnvironmentSection:
    """Tests for the environment/locale section."""

    def test_reports_current_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment variable is read on every call."""
        monkeypatch.setenv(ENVIRONMENT_VARIABLE, "staging")
        assert capture_snapshot()["environment"]["env"] == "staging"

        monkeypatch.setenv(ENVIRONMENT_VARIABLE, "production")
        assert capture_snapshot()["environment"]["env"] == "production"

    def test_unknown_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the sentinel when the variable is absent."""
        monkeypatch.delenv(ENVIRONMENT_VARIABLE, raising=False)

        assert capture_snapshot()["environment"]["env"] == UNKNOWN

    def test_locale_normalized(self) -> None:
        """Test locale names use hyphens."""
        with patch("hostlog.inferred.locale.getlocale", return_value=("en_US", "UTF-8")):
            assert capture_snapshot()["environment"]["locale"] == "en-US"

    def test_locale_unknown(self) -> None:
        """Test the sentinel when no locale is set."""
        with patch("hostlog.inferred.locale.getlocale", return_value=(None, None)):
            assert capture_snapshot()["environment"]["locale"] == UNKNOWN

    def test_timezone_is_string(self) -> None:
        """Test the timezone name is reported."""
        assert isinstance(capture_snapshot()["environment"]["timezone"], str)


class TestCpuModel:
    """Tests for the CPU model string."""

    def test_reads_model_name_from_cpuinfo(self, tmp_path: Path) -> None:
        """Test the first model name line is reported."""
        cpuinfo = tmp_path / "cpuinfo"
        cpuinfo.write_text(
            "processor\t: 0\n"
            "vendor_id\t: GenuineIntel\n"
            "model name\t: Intel(R) Xeon(R) CPU @ 2.20GHz\n"
            "\n"
            "processor\t: 1\n"
            "model name\t: Intel(R) Xeon(R) CPU @ 2.20GHz\n",
            encoding="utf-8",
        )

        with patch("hostlog.inferred.CPUINFO_PATH", str(cpuinfo)):
            hardware = capture_snapshot()["hardware"]

        assert hardware["cpu_model"] == "Intel(R) Xeon(R) CPU @ 2.20GHz"

    def test_falls_back_without_cpuinfo(self, tmp_path: Path) -> None:
        """Test the platform processor string is used when /proc is missing."""
        with (
            patch("hostlog.inferred.CPUINFO_PATH", str(tmp_path / "missing")),
            patch("hostlog.inferred.platform.processor", return_value="arm"),
        ):
            hardware = capture_snapshot()["hardware"]

        assert hardware["cpu_model"] == "arm"

    def test_falls_back_without_model_name(self, tmp_path: Path) -> None:
        """Test cpuinfo without a model name line falls back to the machine."""
        cpuinfo = tmp_path / "cpuinfo"
        cpuinfo.write_text("processor\t: 0\nHardware\t: BCM2835\n", encoding="utf-8")

        with (
            patch("hostlog.inferred.CPUINFO_PATH", str(cpuinfo)),
            patch("hostlog.inferred.platform.processor", return_value=""),
            patch("hostlog.inferred.platform.machine", return_value="aarch64"),
        ):
            hardware = capture_snapshot()["hardware"]

        assert hardware["cpu_model"] == "aarch64"


class TestNetworkAddresses:
    """Tests for interface address filtering."""

    def test_filters_loopback_and_ipv6(self) -> None:
        """Test only non-loopback IPv4 addresses are kept, in order."""
        interfaces = {
            "lo": [_address(socket.AF_INET, "127.0.0.1")],
            "eth0": [
                _address(socket.AF_INET6, "fe80::1"),
                _address(socket.AF_INET, "10.0.0.5"),
            ],
            "eth1": [_address(socket.AF_INET, "192.168.1.20")],
        }

        with patch("hostlog.inferred.psutil.net_if_addrs", return_value=interfaces):
            network = capture_snapshot()["network"]

        assert network == {
            "ip_addresses": ["10.0.0.5", "192.168.1.20"],
            "primary_ip": "10.0.0.5",
        }

    def test_none_sentinel_when_empty(self) -> None:
        """Test the sentinel when only loopback is bound."""
        interfaces = {"lo": [_address(socket.AF_INET, "127.0.0.1")]}

        with patch("hostlog.inferred.psutil.net_if_addrs", return_value=interfaces):
            network = capture_snapshot()["network"]

        assert network == {"ip_addresses": [NO_ADDRESS], "primary_ip": NO_ADDRESS}


class TestSnapshotFailure:
    """Tests for the error-shaped fallback."""

    def test_returns_error_shape(self) -> None:
        """Test provider failures never raise."""
        with patch(
            "hostlog.inferred.psutil.virtual_memory",
            side_effect=OSError("permission denied"),
        ):
            snapshot = capture_snapshot()

        assert snapshot == {
            "error": "Failed to gather system information",
            "message": "permission denied",
        }

    def test_message_falls_back_to_type_name(self) -> None:
        """Test an empty exception message is replaced by the type name."""
        with patch("hostlog.inferred.psutil.Process", side_effect=RuntimeError()):
            snapshot = capture_snapshot()

        assert snapshot["message"] == "RuntimeError"

    def test_not_cached(self) -> None:
        """Test each call captures fresh state."""
        first = capture_snapshot()
        second = capture_snapshot()

        assert first is not second
        assert first["system"] is not second["system"]
