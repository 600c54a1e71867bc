import json
from pathlib import Path

import pytest

from server_builder.core.errors import ConfigurationError
from server_builder.manifest.static_source import StaticManifestSource


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_servers_in_order_with_custom_images(tmp_path: Path):
    path = _write(
        tmp_path,
        {
            "images": {"alpine": "img-alpine"},
            "servers": [
                {"name": "web1", "boot": "ide:0:0", "drives": [{"name": "d1", "size": 1, "image": "alpine"}]},
                {"name": "web2", "boot": "ide:0:0", "avoid": ["web1"], "drives": [{"name": "d2", "size": 1}]},
            ],
        },
    )

    manifest = StaticManifestSource(path=path).load()

    assert [s.name for s in manifest.servers] == ["web1", "web2"]
    assert manifest.images.resolve("alpine").source_id == "img-alpine"
    assert "ubuntu" in manifest.images
    assert manifest.servers[1].get_config_value("avoid") == ["web1"]


def test_unknown_image_fails_at_load_time(tmp_path: Path):
    path = _write(
        tmp_path,
        {"servers": [{"name": "web1", "drives": [{"name": "d1", "size": 1, "image": "beos"}]}]},
    )

    with pytest.raises(ConfigurationError, match="beos"):
        StaticManifestSource(path=path).load()


def test_duplicate_names_are_rejected(tmp_path: Path):
    path = _write(tmp_path, {"servers": [{"name": "a"}, {"name": "a"}]})

    with pytest.raises(ConfigurationError):
        StaticManifestSource(path=path).load()


@pytest.mark.parametrize("payload", [[], {"servers": {}}, {"images": [], "servers": []}])
def test_malformed_manifests(tmp_path: Path, payload):
    with pytest.raises(ConfigurationError):
        StaticManifestSource(path=_write(tmp_path, payload)).load()


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        StaticManifestSource(path=tmp_path / "nope.json").load()
