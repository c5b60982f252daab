"""
Unit tests for toolchain driver location and execution.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gcclink.build.errors import ToolInvocationError, ToolNotFoundError
from gcclink.build.tool_invoker import (
    default_driver_name,
    driver_name,
    format_command_line,
    invoke,
    locate_toolchain_driver,
)


class TestDefaultDriverName:
    """Test suite for default_driver_name."""

    def test_plain_ld(self):
        assert default_driver_name(plain_ld=True) == "ld"

    @patch("gcclink.build.tool_invoker.platform.system", return_value="Linux")
    def test_linux(self, mock_system):
        assert default_driver_name() == "gcc"

    @patch("gcclink.build.tool_invoker.platform.system", return_value="FreeBSD")
    def test_freebsd(self, mock_system):
        assert default_driver_name() == "clang"


class TestDriverName:
    """Test suite for driver_name."""

    def test_override_wins(self):
        assert driver_name("gcc-12", environ={"CC": "clang"}) == "gcc-12"

    def test_cc_environment(self):
        assert driver_name(environ={"CC": "clang-17"}) == "clang-17"

    def test_ld_environment_for_plain_ld(self):
        assert driver_name(environ={"CC": "clang", "LD": "ld.lld"}, plain_ld=True) == "ld.lld"

    def test_plain_ld_ignores_cc(self):
        assert driver_name(environ={"CC": "clang"}, plain_ld=True) == "ld"

    @patch("gcclink.build.tool_invoker.default_driver_name", return_value="gcc")
    def test_default(self, mock_default):
        assert driver_name(environ={}) == "gcc"

    def test_no_path_lookup(self):
        assert driver_name("no-such-driver-xyz", environ={}) == "no-such-driver-xyz"


class TestLocateToolchainDriver:
    """Test suite for locate_toolchain_driver."""

    @patch("gcclink.build.tool_invoker.shutil.which")
    def test_override_wins(self, mock_which):
        mock_which.return_value = "/opt/bin/gcc-12"

        result = locate_toolchain_driver("gcc-12", environ={"CC": "clang"})

        assert result == Path("/opt/bin/gcc-12")
        mock_which.assert_called_once_with("gcc-12")

    @patch("gcclink.build.tool_invoker.shutil.which")
    def test_cc_environment(self, mock_which):
        mock_which.return_value = "/usr/bin/clang"

        locate_toolchain_driver(environ={"CC": "clang"})

        mock_which.assert_called_once_with("clang")

    @patch("gcclink.build.tool_invoker.shutil.which")
    def test_ld_environment_for_plain_ld(self, mock_which):
        mock_which.return_value = "/usr/bin/ld.gold"

        locate_toolchain_driver(environ={"CC": "clang", "LD": "ld.gold"}, plain_ld=True)

        mock_which.assert_called_once_with("ld.gold")

    @patch("gcclink.build.tool_invoker.default_driver_name", return_value="gcc")
    @patch("gcclink.build.tool_invoker.shutil.which")
    def test_default_name(self, mock_which, mock_default):
        mock_which.return_value = "/usr/bin/gcc"

        assert locate_toolchain_driver(environ={}) == Path("/usr/bin/gcc")
        mock_which.assert_called_once_with("gcc")

    @patch("gcclink.build.tool_invoker.shutil.which", return_value=None)
    def test_not_found(self, mock_which):
        with pytest.raises(ToolNotFoundError, match="failed to locate gcc-99"):
            locate_toolchain_driver("gcc-99", environ={})


class TestFormatCommandLine:
    """Test suite for format_command_line."""

    def test_quotes_arguments(self):
        result = format_command_line(Path("/usr/bin/gcc"), ["a.o", "-o", "my app"])

        assert result == "/usr/bin/gcc a.o -o 'my app'"


class TestInvoke:
    """Test suite for invoke."""

    @patch("gcclink.build.tool_invoker.subprocess.Popen")
    def test_returns_exit_status(self, mock_popen):
        mock_popen.return_value.wait.return_value = 1

        assert invoke("/usr/bin/gcc", ["a.o", "-o", "out"]) == 1
        mock_popen.assert_called_once_with(["/usr/bin/gcc", "a.o", "-o", "out"])

    @patch("gcclink.build.tool_invoker.subprocess.Popen")
    def test_success(self, mock_popen):
        mock_popen.return_value.wait.return_value = 0

        assert invoke(Path("/usr/bin/gcc"), ["a.o"]) == 0

    @patch("gcclink.build.tool_invoker.subprocess.Popen")
    def test_verbose_echoes_command(self, mock_popen, capsys):
        mock_popen.return_value.wait.return_value = 0

        invoke("gcc", ["a.o", "-o", "out"], verbose=True)

        assert capsys.readouterr().out.strip() == "gcc a.o -o out"

    @patch("gcclink.build.tool_invoker.subprocess.Popen")
    def test_quiet_by_default(self, mock_popen, capsys):
        mock_popen.return_value.wait.return_value = 0

        invoke("gcc", ["a.o"])

        assert capsys.readouterr().out == ""

    @patch("gcclink.build.tool_invoker.subprocess.Popen", side_effect=PermissionError("denied"))
    def test_spawn_failure(self, mock_popen):
        with pytest.raises(ToolInvocationError, match="Error executing gcc"):
            invoke("gcc", ["a.o"])

    @patch("gcclink.build.tool_invoker.terminate_process_tree")
    @patch("gcclink.build.tool_invoker.subprocess.Popen")
    def test_interrupt_kills_process_tree(self, mock_popen, mock_terminate):
        process = MagicMock()
        process.pid = 4242
        process.wait.side_effect = KeyboardInterrupt
        mock_popen.return_value = process

        with pytest.raises(KeyboardInterrupt):
            invoke("gcc", ["a.o"])

        mock_terminate.assert_called_once_with(4242)
