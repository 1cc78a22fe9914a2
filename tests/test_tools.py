"""
Tests for the command line tools.
"""

import importlib.util
import json
from pathlib import Path

import pytest

TOOLS_DIR = Path(__file__).resolve().parent.parent / "tools"


@pytest.fixture(scope="module")
def dump_geometry():
    module_spec = importlib.util.spec_from_file_location(
        "dump_geometry", TOOLS_DIR / "dump_geometry.py",
    )
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class TestDumpGeometry:
    """Tests for tools/dump_geometry.py."""
    
    def test_regular_layout(self, dump_geometry, capsys):
        assert dump_geometry.main(["--count", "4"]) == 0
        
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["dimension"] == "2d"
        assert len(snapshot["channels"]) == 4
        assert snapshot["channels"][0]["width"] == pytest.approx(1.5707963, rel=1e-6)
    
    def test_explicit_layout(self, dump_geometry, capsys):
        code = dump_geometry.main([
            "--azimuths", "0", "90", "180", "270", "0", "0",
            "--elevations", "0", "0", "0", "0", "90", "-90",
        ])
        assert code == 0
        
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["dimension"] == "3d"
        assert len(snapshot["channels"][4]["top"]) == 4
    
    def test_sphere(self, dump_geometry, capsys):
        assert dump_geometry.main(["--sphere", "--count", "6", "--indent", "0"]) == 0
        assert json.loads(capsys.readouterr().out)["needs_rendering"] is False
    
    def test_rejected_layout(self, dump_geometry, capsys):
        assert dump_geometry.main(["--count", "0"]) == 1
        assert "error:" in capsys.readouterr().err
    
    def test_horizontal_ring_on_sphere(self, dump_geometry, capsys):
        code = dump_geometry.main([
            "--azimuths", "0", "90", "180", "270",
            "--elevations", "0", "0", "0", "0",
        ])
        assert code == 0
        
        channels = json.loads(capsys.readouterr().out)["channels"]
        assert all(channel["top"] and channel["bottom"] for channel in channels)
