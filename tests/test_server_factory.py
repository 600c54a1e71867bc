import pytest

from server_builder.core.errors import ConfigurationError, EntityStateError
from server_builder.core.types import RequestKind, Server
from server_builder.factories.server import ServerFactory


def _server_cfg(**overrides):
    cfg = {
        "name": "testserver1",
        "cpu": "500",
        "mem": "256",
        "nic:0:model": "e1000",
        "nic:0:dhcp": "auto",
        "boot": "ide:0:0",
    }
    cfg.update(overrides)
    return cfg


def _drives(count):
    return [{"name": f"testdrive{i}", "size": 1000000 * i} for i in range(1, count + 1)]


def _created(server: Server) -> Server:
    for i, drive in enumerate(server.drives, start=1):
        drive.set_identifier(f"driveid{i}")
    return server


def test_a_server_without_a_drive_is_a_configuration_error():
    server = Server.from_config(_server_cfg())

    with pytest.raises(ConfigurationError):
        ServerFactory().create(server)


def test_a_simple_server():
    server = Server.from_config(_server_cfg(drives=[{"name": "testdrive", "size": 1000000}]))
    server.drives[0].set_identifier("abc123")

    request = ServerFactory().create(server)

    assert request.command == "servers create"
    assert "name testserver1" in request.args
    assert "cpu 500" in request.args
    assert "mem 256" in request.args
    assert "nic:0:model e1000" in request.args
    assert "nic:0:dhcp auto" in request.args
    assert "boot ide:0:0" in request.args
    assert "ide:0:0 abc123" in request.args


def test_settings_keep_configuration_order_before_drive_slots():
    server = _created(Server.from_config(_server_cfg(drives=_drives(1))))

    args = list(ServerFactory().create(server).args)

    assert args[:6] == [
        "name testserver1",
        "cpu 500",
        "mem 256",
        "nic:0:model e1000",
        "nic:0:dhcp auto",
        "boot ide:0:0",
    ]
    assert args[6] == "ide:0:0 driveid1"


def test_a_server_with_lots_of_drives_fills_every_slot():
    server = _created(Server.from_config(_server_cfg(drives=_drives(4))))

    args = ServerFactory().create(server).args

    assert "ide:0:0 driveid1" in args
    assert "ide:0:1 driveid2" in args
    assert "ide:1:0 driveid3" in args
    assert "ide:1:1 driveid4" in args


def test_a_server_with_too_many_drives_is_a_configuration_error():
    server = _created(Server.from_config(_server_cfg(drives=_drives(5))))

    with pytest.raises(ConfigurationError):
        ServerFactory().create(server)


@pytest.mark.parametrize("missing", ["name", "boot"])
def test_mandatory_settings(missing):
    cfg = _server_cfg(drives=_drives(1))
    del cfg[missing]

    with pytest.raises(ConfigurationError):
        ServerFactory().validate(Server.from_config(cfg))


def test_avoid_setting_is_not_passed_through_but_annotations_are():
    server = _created(Server.from_config(_server_cfg(avoid=["web1"], drives=_drives(1))))
    server.avoid_sharing_hardware_with_servers(["s1"])
    server.avoid_sharing_hardware_with_drives(["d1", "d2"])

    args = ServerFactory().create(server).args

    assert not any(a.startswith("avoid ") for a in args)
    assert args[-2:] == ("avoid:servers s1", "avoid:drives d1 d2")


def test_uncreated_drive_cannot_be_attached():
    server = Server.from_config(_server_cfg(drives=_drives(1)))

    with pytest.raises(EntityStateError):
        ServerFactory().create(server)


def test_we_can_get_ip_and_id_from_response():
    server_id = "55559c30-1f11-4363-ac54-dsd98sd98sd"
    ip = "91.203.56.132"
    response = [
        "boot ide:0:0",
        "cpu 500",
        "ide:0:0 6052916e-102f-4db7-abdd-fd98f0d9f8d",
        "ide:0:0:read:bytes 0",
        "mem 256",
        "name testserver1",
        "nic:0:dhcp auto",
        "nic:0:dhcp:ip " + ip,
        "nic:0:model e1000",
        "server " + server_id,
        "smp:cores 1",
        "started 1403554639",
        "status active",
        "user eeeeeee-1111-1111-ffff-6f6f6f6f6f6",
    ]
    server = Server.from_config({"name": "testserver1", "cpu": "500"})

    ServerFactory().parse_response(server, response, RequestKind.create)

    assert server.public_ip == ip
    assert server.identifier == server_id
    assert server.status == "active"


def test_create_response_without_server_id_fails():
    server = Server.from_config({"name": "testserver1"})

    with pytest.raises(EntityStateError):
        ServerFactory().parse_response(server, ["status active"], RequestKind.create)


def test_info_requires_identifier():
    server = Server.from_config({"name": "testserver1"})
    with pytest.raises(EntityStateError):
        ServerFactory().info(server)

    server.set_identifier("srv-1")
    assert ServerFactory().info(server).command == "servers srv-1 info"


def test_line_break_in_a_setting_is_a_configuration_error():
    server = _created(Server.from_config(_server_cfg(cpu="500\nide:1:1 foreign", drives=_drives(1))))

    with pytest.raises(ConfigurationError):
        ServerFactory().validate(server)
    with pytest.raises(ConfigurationError):
        ServerFactory().create(server)
