"""
Tests for gnwenc - GNW Image Builder CLI
========================================

These tests drive the gnwenc commands through click's CliRunner with a
small manifest, render output and asset tree on disk.
"""

import json

import pytest
from click.testing import CliRunner

from conftest import ROM_DATA, ROM_SHA1, make_platform, make_rendered, write_render
from gnw_sdk import __version__
from gnw_sdk.cli.gnwenc import main, select_platforms
from gnw_sdk.gnw import GnwParser
from gnw_sdk.platform import CPUType


def manifest_entry(name, cpu, company, rom="rom.bin"):
    return {
        "device": {"cpu": cpu, "screen": {"Single": {"width": 80.0, "height": 64.0}}},
        "port_map": {"ports": [], "ground_last_index": None},
        "rom": {"rom": rom, "rom_hash": ROM_SHA1},
        "metadata": {"name": name, "company": company},
    }


MANIFEST = {
    "gnw_ball": manifest_entry("Game & Watch: Ball", "SM5a", "Nintendo"),
    "gnw_octopus": manifest_entry("Game & Watch: Octopus", "SM510", "Nintendo"),
    "tronica_thief": manifest_entry("Tronica: Thief in Garden", "SM510", "Tronica"),
    "nupogodi": manifest_entry("Nu, pogodi!", "KB1013VK12", "Bootleg (Elektronika)"),
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """
    Manifest plus render and asset trees. gnw_ball and tronica_thief are
    installed; gnw_octopus and nupogodi are not.
    """
    monkeypatch.delenv("GNW_BUILD_REVISION", raising=False)
    monkeypatch.delenv("GNW_ENTRIES_PER_ROW", raising=False)

    manifest = tmp_path / "manifest.json"
    manifest.write_text(json.dumps(MANIFEST))

    renders = tmp_path / "renders"
    assets = tmp_path / "assets"
    output = tmp_path / "out"
    output.mkdir()

    for name in ("gnw_ball", "tronica_thief"):
        write_render(renders / name, make_rendered(16, 8))
        (assets / name).mkdir(parents=True)
        (assets / name / "rom.bin").write_bytes(ROM_DATA)
    renders.mkdir(exist_ok=True)
    assets.mkdir(exist_ok=True)

    return tmp_path


def build_args(ws, *extra):
    return [
        "build", str(ws / "manifest.json"),
        "-r", str(ws / "renders"),
        "-a", str(ws / "assets"),
        "-o", str(ws / "out"),
        *extra,
    ]


# =============================================================================
# Selection Tests
# =============================================================================

class TestSelectPlatforms:
    """Tests for select_platforms()."""

    @pytest.fixture
    def platforms(self):
        return {
            "b": make_platform(cpu=CPUType.SM5A, company="Nintendo"),
            "a": make_platform(cpu=CPUType.SM511, company="Nintendo"),
            "c": make_platform(cpu=CPUType.SM510, company="Bootleg (Elektronika)"),
            "d": make_platform(cpu=CPUType.KB1013VK12, company="Elektronika"),
        }

    def test_all_sorted(self, platforms):
        assert [n for n, _ in select_platforms(platforms)] == ["a", "b", "c", "d"]

    def test_device(self, platforms):
        assert [n for n, _ in select_platforms(platforms, device=" c ")] == ["c"]

    def test_unknown_device(self, platforms):
        assert select_platforms(platforms, device="zz") == []

    def test_cpu(self, platforms):
        assert [n for n, _ in select_platforms(platforms, cpu=CPUType.SM511)] == ["a"]

    def test_supported(self, platforms):
        assert [n for n, _ in select_platforms(platforms, supported=True)] == ["b", "c"]

    def test_company_prefix(self, platforms):
        assert [n for n, _ in select_platforms(platforms, companies=("nin",))] == ["a", "b"]

    def test_company_alias(self, platforms):
        selected = select_platforms(platforms, companies=("Elektronika",))
        assert [n for n, _ in selected] == ["c", "d"]


# =============================================================================
# Build Command Tests
# =============================================================================

class TestBuildCommand:
    """Tests for gnwenc build."""

    def test_builds_installed_devices(self, runner, workspace):
        result = runner.invoke(main, build_args(workspace))

        assert result.exit_code == 0, result.output
        assert "Successfully created device gnw_ball" in result.output
        assert "Skipping device gnw_octopus: Not installed" in result.output
        assert "Total: 4, Success: 2, Fail: 0, Skip: 2" in result.output
        assert (workspace / "out" / "Ball.gnw").exists()
        assert (workspace / "out" / "Tronica - Thief in Garden.gnw").exists()

    def test_image_contents(self, runner, workspace):
        result = runner.invoke(main, build_args(workspace, "-d", "gnw_ball", "--revision", "deadbee"))
        assert result.exit_code == 0, result.output

        parser = GnwParser.from_file(workspace / "out" / "Ball.gnw", width=16, height=8)
        assert parser.header.mpu == CPUType.SM5A
        assert parser.header.get_revision() == "deadbee"
        assert parser.rom == ROM_DATA

    def test_revision_from_environment(self, runner, workspace, monkeypatch):
        monkeypatch.setenv("GNW_BUILD_REVISION", "0123456")
        result = runner.invoke(main, build_args(workspace, "-d", "gnw_ball"))
        assert result.exit_code == 0, result.output

        parser = GnwParser.from_file(workspace / "out" / "Ball.gnw", width=16, height=8)
        assert parser.header.get_revision() == "0123456"

    def test_selected_device_not_installed_fails(self, runner, workspace):
        result = runner.invoke(main, build_args(workspace, "-d", "gnw_octopus"))
        assert result.exit_code == 1
        assert "Failing device gnw_octopus" in result.output
        assert "Total: 1, Success: 0, Fail: 1, Skip: 0" in result.output

    def test_installed_flag_skips(self, runner, workspace):
        result = runner.invoke(main, build_args(workspace, "-d", "gnw_octopus", "-i"))
        assert result.exit_code == 0
        assert "Total: 1, Success: 0, Fail: 0, Skip: 1" in result.output

    def test_failure_does_not_stop_other_devices(self, runner, workspace):
        (workspace / "assets" / "gnw_ball" / "rom.bin").unlink()
        result = runner.invoke(main, build_args(workspace))

        assert result.exit_code == 1
        assert "No SHA matched ROM found" in result.output
        assert "Failing device gnw_ball" in result.output
        assert "Successfully created device tronica_thief" in result.output
        assert "Total: 4, Success: 1, Fail: 1, Skip: 2" in result.output
        assert not (workspace / "out" / "Ball.gnw").exists()

    def test_non_finite_screen_fails_only_that_device(self, runner, workspace):
        manifest = dict(MANIFEST)
        bad = manifest_entry("Game & Watch: Ball", "SM5a", "Nintendo")
        bad["device"]["screen"] = {"Single": {"width": float("inf"), "height": 64.0}}
        manifest["gnw_ball"] = bad
        (workspace / "manifest.json").write_text(json.dumps(manifest))

        result = runner.invoke(main, build_args(workspace))

        assert result.exit_code == 1
        assert "Failing device gnw_ball" in result.output
        assert "Successfully created device tronica_thief" in result.output
        assert "Total: 4, Success: 1, Fail: 1, Skip: 2" in result.output

    def test_company_filter(self, runner, workspace):
        result = runner.invoke(main, build_args(workspace, "--company", "tronica"))
        assert result.exit_code == 0
        assert "Total: 1, Success: 1, Fail: 0, Skip: 0" in result.output

    def test_no_match(self, runner, workspace):
        result = runner.invoke(main, build_args(workspace, "-d", "gnw_zelda"))
        assert result.exit_code == 0
        assert "No manifest listings for selected devices found" in result.output

    def test_invalid_cpu(self, runner, workspace):
        result = runner.invoke(main, build_args(workspace, "--cpu", "Z80"))
        assert result.exit_code == 2
        assert "Invalid CPU" in result.output

    def test_bad_manifest(self, runner, workspace):
        (workspace / "manifest.json").write_text("[")
        result = runner.invoke(main, build_args(workspace))
        assert result.exit_code == 1
        assert "Manifest error" in result.output


# =============================================================================
# List and Info Command Tests
# =============================================================================

class TestListCommand:
    def test_list_all(self, runner, workspace):
        result = runner.invoke(main, ["list", str(workspace / "manifest.json")])
        assert result.exit_code == 0
        assert "gnw_ball" in result.output
        assert "Game & Watch: Octopus" in result.output
        assert "4 devices" in result.output

    def test_list_supported(self, runner, workspace):
        result = runner.invoke(main, ["list", str(workspace / "manifest.json"), "--supported"])
        assert result.exit_code == 0
        assert "nupogodi" not in result.output
        assert "3 devices" in result.output


class TestInfoCommand:
    def test_info(self, runner, workspace):
        runner.invoke(main, build_args(workspace, "-d", "gnw_ball", "--revision", "abc1234"))
        image = workspace / "out" / "Ball.gnw"

        result = runner.invoke(main, ["info", str(image), "--width", "16", "--height", "8"])
        assert result.exit_code == 0, result.output
        assert "SM5a" in result.output
        assert "single, 80x64" in result.output
        assert "abc1234" in result.output
        assert f"ROM size:       {len(ROM_DATA)} bytes" in result.output

    def test_info_wrong_raster(self, runner, workspace):
        runner.invoke(main, build_args(workspace, "-d", "gnw_ball"))
        image = workspace / "out" / "Ball.gnw"

        result = runner.invoke(main, ["info", str(image)])
        assert result.exit_code == 1
        assert "Image too small" in result.output


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
