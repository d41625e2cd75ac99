import pytest
from pydantic import ValidationError

from waitmounts.models import MonitorConfig


@pytest.fixture
def config() -> MonitorConfig:
    return MonitorConfig(mount_points=["/mnt/nas"], container_ids=["101", "102"])


def test_list_input_is_stored_as_tuple(config):
    assert config.mount_points == ("/mnt/nas",)
    assert config.container_ids == ("101", "102")


def test_mount_points_cannot_be_extended(config):
    with pytest.raises(AttributeError):
        config.mount_points.append("/mnt/extra")

    assert config.mount_points == ("/mnt/nas",)


def test_fields_cannot_be_reassigned(config):
    with pytest.raises(ValidationError):
        config.container_ids = ("103",)


def test_relative_mount_point_rejected():
    with pytest.raises(ValidationError, match="absolute path"):
        MonitorConfig(mount_points=["mnt/nas"], container_ids=["101"])
