import pytest

from server_builder.core.errors import ExecutionFailed
from server_builder.core.lines import parse_lines
from server_builder.execution.mock import InMemoryControlPlane


def test_drive_create_returns_id_and_echoes_config():
    plane = InMemoryControlPlane()

    fields = parse_lines(plane.execute("drives create", ["name d1", "size 1000"]))

    assert fields["drive"] in plane.drives
    assert fields["name"] == "d1"
    assert fields["size"] == "1000"
    assert fields["status"] == "active"


def test_imaging_reports_queued_then_true_then_false():
    plane = InMemoryControlPlane(imaging_polls=2)
    drive_id = parse_lines(plane.execute("drives create", ["name d1", "size 1"]))["drive"]

    assert plane.execute(f"drives {drive_id} image src", []) == []
    tokens = [parse_lines(plane.execute(f"drives {drive_id} info", []))["imaging"] for _ in range(4)]

    assert tokens == ["queued", "true", "false", "false"]


def test_server_create_needs_existing_drives():
    plane = InMemoryControlPlane()

    with pytest.raises(ExecutionFailed):
        plane.execute("servers create", ["name s1", "ide:0:0 nope"])


def test_server_create_assigns_dhcp_address_only_with_dhcp():
    plane = InMemoryControlPlane()
    drive_id = parse_lines(plane.execute("drives create", ["name d1", "size 1"]))["drive"]

    with_dhcp = parse_lines(
        plane.execute("servers create", ["name s1", "nic:0:dhcp auto", f"ide:0:0 {drive_id}"])
    )
    without = parse_lines(plane.execute("servers create", ["name s2", f"ide:0:0 {drive_id}"]))

    assert with_dhcp["nic:0:dhcp:ip"].startswith("91.203.56.")
    assert "nic:0:dhcp:ip" not in without
    info = parse_lines(plane.execute(f"servers {with_dhcp['server']} info", []))
    assert info["name"] == "s1"


def test_failure_injection_and_unknown_commands():
    plane = InMemoryControlPlane(fail_on=("servers",))

    with pytest.raises(ExecutionFailed):
        plane.execute("servers create", [])
    with pytest.raises(ExecutionFailed):
        plane.execute("drives list", [])

    assert plane.commands() == ["servers create", "drives list"]
