"""
End-to-end tests: project loading, the export pipeline and the CLI.
"""
import json
import sys
import time
from pathlib import Path

import pytest

from fraexport import Exporter, ExportConfig, export, load_project
from fraexport.build_fra import main, output_directories
from fraexport.errors import ExportError
from fraexport.media import MediaLoader
from fraexport.progress import ProgressReporter
from fraexport.project import AssetMetadata, ExportSource
from fraexport.serialization import read_container
from fraexport.utils import get_errors, get_warnings
from conftest import (
    canvas_with_block, png_bytes, image_symbol, box_symbol, keyframe, layer, entity_dict,
)


MANIFEST = json.dumps({"resourceId": "mychar", "content": [
    {"id": "mychar", "name": "My Char", "type": "character", "scriptId": "charScript"},
]})


def project_dict(extra_images=()):
    entity = entity_dict(
        animations=[{"name": "idle", "layers": ["img", "box"]},
                    {"name": "run", "layers": ["img"]}],
        layers=[layer("img", "IMAGE", ["k1"]), layer("box", "COLLISION_BOX", ["k2", "k3"])],
        keyframes=[keyframe("k1", "IMAGE", "s1", length=2),
                   keyframe("k2", "COLLISION_BOX", "b1", length=4, tweened=True),
                   keyframe("k3", "COLLISION_BOX", "b2")],
        symbols=[image_symbol("s1", "hero-img", x=-8, y=-16),
                 box_symbol("b1", x=10), box_symbol("b2", x=50)],
    )
    return {
        "outputFolders": [{"id": "main", "path": "dist"}],
        "files": {
            "hero-img": "library/hero.png",
            "jump-snd": "library/jump.ogg",
            "table-bin": "library/table.bin",
            "script-guid": "library/Character.hx",
            "unused-img": "library/unused.png",
        },
        "spriteEntityAssets": [entity],
        "imageAssets": [{"guid": "hero-img", "id": "heroImage"}] + list(extra_images),
        "audioAssets": [{"guid": "jump-snd", "id": "jump"}],
        "binaryAssets": [{"guid": "table-bin", "id": "table"}],
        "scriptAssets": [
            {"guid": "manifest-guid", "id": "manifest", "script": MANIFEST, "language": "json"},
            {"guid": "script-guid", "id": "charScript", "script": "function update() {}"},
        ],
        "paletteCollectionAssets": [{
            "guid": "pal-guid", "id": "costumes",
            "colors": [{"$id": "c1", "color": "0xFFFF0000"}],
            "maps": [{"name": "Default", "colors": [{"paletteColorId": "c1", "targetColor": "0xFF00FF00"}]}],
        }],
        "nineSliceAssets": [{"guid": "ns-guid", "id": "panel", "imageAsset": "hero-img",
                             "borderLeft": 1, "borderTop": 1, "borderRight": 1, "borderBottom": 1}],
    }


def write_project(directory, data):
    library = directory / "library"
    library.mkdir(parents=True, exist_ok=True)
    (library / "hero.png").write_bytes(png_bytes(canvas_with_block(16, 16, 2, 3, 4, 4)))
    (library / "unused.png").write_bytes(png_bytes(canvas_with_block(8, 8, 0, 0, 8, 8)))
    (library / "jump.ogg").write_bytes(b"OggS" + b"\x00" * 12)
    (library / "table.bin").write_bytes(bytes(range(32)))
    (library / "Character.hx").write_text("function update() {}", encoding="utf-8")
    path = directory / "project.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def project_path(tmp_path):
    return write_project(tmp_path, project_dict())


RAW = ExportConfig(json_format="raw")


# ══════════════════════════════════════════════════════════════════════════
# Project loading
# ══════════════════════════════════════════════════════════════════════════

class TestLoadProject:

    def test_payloads_are_read(self, project_path):
        source = load_project(project_path)
        assert source.get_asset("hero-img").data[:8] == b"\x89PNG\r\n\x1a\n"
        assert source.get_asset("jump-snd").filename == "library/jump.ogg"
        assert [m.id for m in source.script_assets] == ["manifest", "charScript"]
        assert source.output_folders[0].path == "dist"

    def test_missing_project(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_project(tmp_path / "missing.json")

    def test_missing_payload_warns(self, tmp_path):
        data = project_dict()
        data["files"]["table-bin"] = "library/gone.bin"
        source = load_project(write_project(tmp_path, data))
        assert source.get_asset("table-bin").data is None
        assert any("gone.bin" in w for w in get_warnings())

    def test_output_directories(self, project_path, tmp_path):
        source = load_project(project_path)
        assert output_directories(source, project_path) == [tmp_path / "dist"]
        assert output_directories(source, project_path, "elsewhere") == [Path("elsewhere")]


# ══════════════════════════════════════════════════════════════════════════
# Export pipeline
# ══════════════════════════════════════════════════════════════════════════

class TestExport:

    def test_header_contents(self, project_path):
        header, binary = read_container(export(load_project(project_path), RAW))

        assert header["version"] == "0.0.17"
        assert [s["id"] for s in header["scripts"]] == ["manifest", "charScript", "costumes"]
        assert header["scripts"][1]["language"] == "hscript"
        assert header["scripts"][2]["language"] == "json"
        assert [i["id"] for i in header["images"]] == ["heroImage"]
        assert header["audio"][0]["format"] == "ogg"
        assert header["binary"][0]["bytesLength"] == 32

        (sheet,) = header["spritesheets"]
        assert sheet["frames"] == [0, 0, 4, 4]
        (nine_slice,) = header["nineSlices"]
        assert (nine_slice["sheetIndex"], nine_slice["frameIndex"]) == (0, 0)

    def test_entity_contents(self, project_path):
        header, _ = read_container(export(load_project(project_path), RAW))
        (entity,) = header["entities"]
        idle, run = entity["animations"]
        image_layer, box_layer = idle["layers"]

        assert image_layer["keyframes"][0]["symbol"]["data"] == [-6, -13, 1, 0, 0, 0, 1, 1, 0, 0]
        assert [k["symbol"]["data"][0] for k in box_layer["keyframes"]] == [10, 20, 30, 40, 50]
        assert run["layers"][0]["keyframes"] == image_layer["keyframes"]

    def test_payload_bytes_are_verbatim(self, project_path):
        header, binary = read_container(export(load_project(project_path), RAW))
        record = header["images"][0]
        png = binary[record["bytesOffset"]:record["bytesOffset"] + record["bytesLength"]]
        assert png == (project_path.parent / "library" / "hero.png").read_bytes()

    def test_unexported_image_changes_nothing(self, tmp_path):
        plain = write_project(tmp_path / "plain", project_dict())
        extra = write_project(tmp_path / "extra", project_dict(
            extra_images=[{"guid": "unused-img", "id": "unused", "export": False}]))
        assert export(load_project(plain), RAW) == export(load_project(extra), RAW)

    def _media_only_source(self, images, audio):
        source = ExportSource()
        for metadata in images:
            source.add_asset(metadata, filename=f"{metadata.guid}.png",
                             data=png_bytes(canvas_with_block(8, 8, 1, 1, 2, 2)))
            source.image_assets.append(metadata)
        for metadata in audio:
            source.add_asset(metadata, filename=f"{metadata.guid}.ogg", data=b"OggS")
            source.audio_assets.append(metadata)
        return source

    def test_media_progress_counts_exported_assets_only(self):
        source = self._media_only_source(
            images=[AssetMetadata(guid="hero", id="hero")],
            audio=[AssetMetadata(guid=f"sfx{i}", id=f"sfx{i}", export=False) for i in range(3)])
        seen = []
        export(source, RAW, on_progress=seen.append)
        assert seen[0] == 30
        assert seen[-1] == 100

    def test_unexported_images_are_decoded_but_not_counted(self):
        hidden = AssetMetadata(guid="hidden", id="hidden", export=False)
        nameless = AssetMetadata(guid="nameless")
        source = self._media_only_source(
            images=[hidden, nameless, AssetMetadata(guid="hero", id="hero")], audio=[])
        seen = []
        loader = MediaLoader(source)
        assert loader.load(ProgressReporter(seen.append)) == 3
        assert seen == [30, 30]
        assert source.get_asset("hidden").pixels is not None

    def test_progress_is_monotonic_and_completes(self, project_path):
        seen = []
        export(load_project(project_path), RAW, on_progress=seen.append)
        assert seen == sorted(seen)
        assert seen[-1] == 100
        assert all(0 <= value <= 100 for value in seen)

    def test_export_is_deterministic(self, project_path):
        assert export(load_project(project_path), RAW) == export(load_project(project_path), RAW)

    def test_undecodable_image_uses_placeholder(self, tmp_path):
        path = write_project(tmp_path, project_dict())
        (tmp_path / "library" / "hero.png").write_bytes(b"not a png")
        header, _ = read_container(export(load_project(path), RAW))
        assert header["spritesheets"][0]["frames"] == [0, 0, 100, 100]
        assert any("Failed to process asset" in e for e in get_errors())

    def test_decode_timeout_is_not_fatal(self, project_path, monkeypatch):
        import fraexport.media.loader as loader_module

        def slow_decode(data):
            time.sleep(0.5)
            raise OSError("too slow")

        monkeypatch.setattr(loader_module, "decode_image", slow_decode)
        config = ExportConfig(json_format="raw", decode_timeout=0.05)
        header, _ = read_container(export(load_project(project_path), config))
        assert header["spritesheets"][0]["frames"] == [0, 0, 100, 100]
        assert any("exceeded" in e for e in get_errors())

    def test_unexpected_failure_is_wrapped(self, project_path, monkeypatch):
        import fraexport.exporter as exporter_module

        def broken(self, container):
            raise KeyError("frames")

        monkeypatch.setattr(exporter_module.ContainerSerializer, "serialize", broken)
        exporter = Exporter(load_project(project_path), RAW)
        with pytest.raises(ExportError, match="KeyError") as excinfo:
            exporter.export()
        assert excinfo.value.error_type == "Publish Error"
        assert exporter.packer.sheets == []

    def test_base64_header_by_default(self, project_path):
        data = export(load_project(project_path))
        header, _ = read_container(data)
        assert header["entities"][0]["id"] == "hero"
        assert data[4:5] != b"{"


# ══════════════════════════════════════════════════════════════════════════
# CLI
# ══════════════════════════════════════════════════════════════════════════

class TestCli:

    def test_writes_resource_file(self, project_path, tmp_path, monkeypatch):
        out = tmp_path / "out"
        monkeypatch.setattr(sys, "argv", ["build_fra", "--project", str(project_path),
                                          "--format", "raw", "--output", str(out)])
        main()
        data = (out / "mychar.fra").read_bytes()
        header, _ = read_container(data)
        assert header["entities"][0]["id"] == "hero"

    def test_default_output_folder(self, project_path, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["build_fra", "--project", str(project_path)])
        main()
        assert (tmp_path / "dist" / "mychar.fra").exists()

    def test_missing_project_exits(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["build_fra", "--project", str(tmp_path / "none.json")])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1

    def test_bad_manifest_exits(self, tmp_path, monkeypatch):
        data = project_dict()
        data["scriptAssets"][0]["script"] = "{broken"
        path = write_project(tmp_path, data)
        monkeypatch.setattr(sys, "argv", ["build_fra", "--project", str(path)])
        with pytest.raises(SystemExit):
            main()
        assert any("Problem parsing manifest" in e for e in get_errors())
