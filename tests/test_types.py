import pytest

from server_builder.core.errors import ConfigurationError, EntityStateError
from server_builder.core.images import ImageCatalogue
from server_builder.core.lines import format_line, parse_lines
from server_builder.core.types import Drive, ImagingStatus, Server


def test_server_from_config_lifts_drives():
    server = Server.from_config(
        {
            "name": "web1",
            "cpu": "500",
            "drives": [{"name": "d1", "size": 10}, {"name": "d2", "size": 20, "image": "ubuntu"}],
        }
    )

    assert server.name == "web1"
    assert "drives" not in server.config
    assert [d.name for d in server.drives] == ["d1", "d2"]
    assert server.drives[1].image == "ubuntu"
    assert server.identifier is None


def test_drive_config_must_be_an_object():
    with pytest.raises(ConfigurationError):
        Server.from_config({"name": "web1", "drives": ["d1"]})


def test_identifier_is_set_at_most_once():
    server = Server.from_config({"name": "web1"})
    server.set_identifier("a")
    server.set_identifier("a")

    with pytest.raises(EntityStateError):
        server.set_identifier("b")

    drive = Drive(name="d1")
    drive.set_identifier("x")
    with pytest.raises(EntityStateError):
        drive.set_identifier("y")


def test_drive_readiness():
    plain = Drive(name="d1", size=1)
    assert not plain.is_ready
    plain.set_identifier("x")
    assert plain.is_ready

    imaged = Drive(name="d2", size=1, image="ubuntu", identifier="y")
    assert not imaged.is_ready
    imaged.mark_imaging()
    assert imaged.imaging == ImagingStatus.in_progress
    assert not imaged.is_ready
    imaged.mark_imaging_complete()
    assert imaged.is_ready


def test_drive_identifiers_skip_uncreated_drives():
    server = Server.from_config({"name": "web1", "drives": [{"name": "d1"}, {"name": "d2"}]})
    server.drives[1].set_identifier("id2")

    assert server.drive_identifiers() == ["id2"]


def test_line_codec():
    assert format_line("avoid:drives", ["a", "b"]) == "avoid:drives a b"
    assert format_line("size", 10) == "size 10"

    parsed = parse_lines(["", "name my drive ", "status active", "empty", "status stopped"])
    assert parsed == {"name": "my drive", "status": "stopped", "empty": ""}


def test_image_catalogue_fails_fast_on_unknown_keyword():
    catalogue = ImageCatalogue.from_mapping({"ubuntu": "u1"})

    assert catalogue.resolve("ubuntu").source_id == "u1"
    assert "ubuntu" in catalogue
    with pytest.raises(ConfigurationError):
        catalogue.validate(["ubuntu", "plan9"])


def test_default_catalogue_knows_ubuntu():
    assert "ubuntu" in ImageCatalogue.default()


def test_null_names_become_empty():
    server = Server.from_config({"name": None, "drives": [{"name": None, "size": 1}]})

    assert server.name == ""
    assert server.drives[0].name == ""


def test_line_breaks_are_rejected():
    with pytest.raises(ConfigurationError):
        format_line("cpu", "500\nide:1:1 foreign")
    with pytest.raises(ConfigurationError):
        format_line("name", ["a", "b\r"])
