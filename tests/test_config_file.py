"""Tests for the key=value configuration file format."""

import pytest

from waitmounts.core.exceptions import ConfigurationError
from waitmounts.models import MonitorConfig
from waitmounts.services.config_loader import (
    parse_config_text,
    read_config_file,
    split_list_value,
    write_config_file,
)


class TestListValues:

    def test_array_and_comma_forms_are_equivalent(self):
        array_form = parse_config_text('MOUNT_POINTS=("/mnt/a" "/mnt/b")')
        comma_form = parse_config_text('MOUNT_POINTS="/mnt/a,/mnt/b"')

        assert array_form.mount_points == ["/mnt/a", "/mnt/b"]
        assert comma_form.mount_points == ["/mnt/a", "/mnt/b"]

    def test_unquoted_comma_list_with_spaces(self):
        assert split_list_value(" /mnt/a , /mnt/b ,") == ["/mnt/a", "/mnt/b"]

    @pytest.mark.parametrize(
        "value",
        ['("/mnt/a","/mnt/b")', '("/mnt/a", "/mnt/b")', "(/mnt/a,/mnt/b)"],
    )
    def test_comma_separated_array_items(self, value):
        assert split_list_value(value) == ["/mnt/a", "/mnt/b"]

    def test_comma_separated_array_in_file(self):
        values = parse_config_text('MOUNT_POINTS=("/mnt/nfs","/mnt/cifs")')
        assert values.mount_points == ["/mnt/nfs", "/mnt/cifs"]

    def test_array_with_single_quotes(self):
        assert split_list_value("('/mnt/my share' \"/mnt/b\")") == ["/mnt/my share", "/mnt/b"]

    def test_unbalanced_array_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            split_list_value('("/mnt/a)')


class TestParseConfigText:

    def test_full_file(self):
        text = """
# Wait-Mounts Configuration
MOUNT_POINTS="/mnt/nfs,/mnt/cifs"
CONTAINERS="101,102,103"
TIMEOUT=600
CHECK_INTERVAL='10'
LOG_PATH="/var/log/custom.log"
"""
        values = parse_config_text(text)

        assert values.mount_points == ["/mnt/nfs", "/mnt/cifs"]
        assert values.container_ids == ["101", "102", "103"]
        assert values.timeout_seconds == 600
        assert values.check_interval_seconds == 10
        assert values.log_path == "/var/log/custom.log"

    def test_comments_blank_lines_and_unknown_keys_are_ignored(self):
        text = """
    # indented comment
UNRELATED=whatever
NOT A KEY VALUE LINE

CONTAINERS=101
"""
        values = parse_config_text(text)

        assert values.container_ids == ["101"]
        assert values.mount_points is None
        assert values.timeout_seconds is None

    def test_whitespace_around_key(self):
        values = parse_config_text('  TIMEOUT = 42')
        assert values.timeout_seconds == 42

    def test_non_integer_timeout(self):
        with pytest.raises(ConfigurationError, match="line|TIMEOUT"):
            parse_config_text("TIMEOUT=five", source="test.conf")

    def test_later_keys_override_earlier(self):
        values = parse_config_text("TIMEOUT=10\nTIMEOUT=20")
        assert values.timeout_seconds == 20


class TestConfigFileIO:

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            await read_config_file(str(tmp_path / "missing.conf"))

    @pytest.mark.asyncio
    async def test_written_file_loads_back(self, tmp_path):
        config = MonitorConfig(
            mount_points=["/mnt/nfs", "/mnt/cifs"],
            container_ids=["101", "102"],
            timeout_seconds=120,
            check_interval_seconds=3,
            log_path="/var/log/wait-mounts.log",
        )
        path = tmp_path / "etc" / "wait-mounts.conf"

        await write_config_file(config, str(path))
        values = await read_config_file(str(path))

        text = path.read_text()
        assert 'MOUNT_POINTS=("/mnt/nfs" "/mnt/cifs")' in text
        assert 'CONTAINERS="101,102"' in text
        assert values.mount_points == list(config.mount_points)
        assert values.container_ids == list(config.container_ids)
        assert values.timeout_seconds == 120
        assert values.check_interval_seconds == 3
