"""
Unit tests for gcclink.ini parser.
"""

import pytest
from pathlib import Path
from gcclink.config.ini_parser import LinkConfig, LinkConfigError, find_default_config


class TestLinkConfig:
    """Test suite for LinkConfig parser."""

    @pytest.fixture
    def tmp_ini_path(self, tmp_path):
        """Fixture to provide a temporary INI file path."""
        return tmp_path / "gcclink.ini"

    @pytest.fixture
    def full_config(self, tmp_ini_path):
        """Create config using every supported option."""
        content = """
[link]
gcc = /usr/bin/gcc-12
linker = gold
lto_binary = /opt/llvm/lib/LLVMgold.so
lib_dir = /opt/gcclink/lib
soname = libfoo.so.1
sanitizers = address, fuzzer
link_no_cpp = yes
disable_linker_strip_dead = off
target = x86_64-unknown-linux-gnu
"""
        tmp_ini_path.write_text(content)
        return tmp_ini_path

    def test_missing_file(self, tmp_ini_path):
        with pytest.raises(LinkConfigError, match="not found"):
            LinkConfig(tmp_ini_path)

    def test_get_options(self, full_config):
        options = LinkConfig(full_config).get_options()

        assert options["gcc"] == "/usr/bin/gcc-12"
        assert options["linker"] == "gold"
        assert len(options) == 9

    def test_get_default(self, tmp_ini_path):
        tmp_ini_path.write_text("[link]\nlinker =\n")
        config = LinkConfig(tmp_ini_path)

        assert config.get("linker") is None
        assert config.get("linker", "bfd") == "bfd"
        assert config.get("gcc", "gcc") == "gcc"

    def test_missing_section(self, tmp_ini_path):
        tmp_ini_path.write_text("[other]\nkey = value\n")
        config = LinkConfig(tmp_ini_path)

        assert config.get_options() == {}
        assert config.get("linker") is None

    def test_get_bool(self, full_config):
        config = LinkConfig(full_config)

        assert config.get_bool("link_no_cpp") is True
        assert config.get_bool("disable_linker_strip_dead") is False

    def test_get_bool_default(self, tmp_ini_path):
        tmp_ini_path.write_text("[link]\n")

        assert LinkConfig(tmp_ini_path).get_bool("link_no_cpp", True) is True

    def test_get_bool_invalid(self, tmp_ini_path):
        tmp_ini_path.write_text("[link]\nlink_no_cpp = sometimes\n")

        with pytest.raises(LinkConfigError, match="must be a boolean"):
            LinkConfig(tmp_ini_path).get_bool("link_no_cpp")

    def test_get_list_commas(self, full_config):
        assert LinkConfig(full_config).get_list("sanitizers") == ["address", "fuzzer"]

    def test_get_list_multiline(self, tmp_ini_path):
        tmp_ini_path.write_text("[link]\nsanitizers =\n    address\n    thread\n")

        assert LinkConfig(tmp_ini_path).get_list("sanitizers") == ["address", "thread"]

    def test_get_list_empty(self, tmp_ini_path):
        tmp_ini_path.write_text("[link]\n")

        assert LinkConfig(tmp_ini_path).get_list("sanitizers") == []

    def test_unknown_option(self, tmp_ini_path):
        tmp_ini_path.write_text("[link]\nlinkr = gold\n")

        with pytest.raises(LinkConfigError, match="Unknown option"):
            LinkConfig(tmp_ini_path).get_options()

    def test_interpolation(self, tmp_ini_path):
        tmp_ini_path.write_text(
            "[paths]\nllvm = /opt/llvm\n\n[link]\nlto_binary = ${paths:llvm}/lib/LLVMgold.so\n"
        )

        assert LinkConfig(tmp_ini_path).get("lto_binary") == "/opt/llvm/lib/LLVMgold.so"

    def test_parse_error(self, tmp_ini_path):
        tmp_ini_path.write_text("this is not an ini file\n")

        with pytest.raises(LinkConfigError, match="Failed to parse"):
            LinkConfig(tmp_ini_path)


class TestFindDefaultConfig:
    """Test suite for find_default_config."""

    def test_found(self, tmp_path):
        (tmp_path / "gcclink.ini").write_text("[link]\n")

        assert find_default_config(tmp_path) == tmp_path / "gcclink.ini"

    def test_absent(self, tmp_path):
        assert find_default_config(tmp_path) is None

    def test_accepts_path(self):
        assert find_default_config(Path("/nonexistent-dir")) is None
