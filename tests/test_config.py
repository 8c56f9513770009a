"""Parameter presets and JSON overrides."""
import json

import pytest

from dotmorph.config import Config, config_from_dict, load_config, override, physics_preset
from dotmorph.core.grid_wave import SweepParams


class TestOverrides:

    def test_defaults(self):
        cfg = Config()
        assert cfg.sweep.flow_duration == 2.0
        assert cfg.sweep.active_column_width == 20
        assert cfg.lattice.spacing == 20
        assert cfg.physics.damping == 0.9
        assert cfg.sequence == ("lineChart", "barChart", "pieChart")

    def test_override_copies(self):
        base = SweepParams()
        new = override(base, {"flow_duration": 0.5})
        assert new.flow_duration == 0.5
        assert base.flow_duration == 2.0

    def test_override_revalidates(self):
        with pytest.raises(ValueError):
            override(SweepParams(), {"direction": "up"})

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="flow_durration"):
            override(SweepParams(), {"flow_durration": 1})


class TestConfigFromDict:

    def test_sections(self):
        cfg = config_from_dict({
            "sweep": {"direction": "reverse"},
            "lattice": {"spacing": 12},
            "physics": {"preset": "pie", "push_force": 1.0},
            "sequence": ["barChart", "pieChart"],
        })
        assert cfg.sweep.direction == "reverse"
        assert cfg.lattice.spacing == 12
        assert cfg.physics.gravity == 0.2
        assert cfg.physics.push_force == 1.0
        assert cfg.sequence == ("barChart", "pieChart")

    @pytest.mark.parametrize("data", [
        {"colors": {}},
        {"sequence": []},
        {"sequence": "lineChart"},
        {"physics": {"preset": "donut"}},
    ])
    def test_rejects(self, data):
        with pytest.raises(ValueError):
            config_from_dict(data)


def test_presets_are_copies():
    a = physics_preset("pie")
    a.gravity = 99
    assert physics_preset("pie").gravity == 0.2


def test_load_config(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"sweep": {"pause_duration": 0.25}}), encoding="utf-8")
    assert load_config(path).sweep.pause_duration == 0.25


def test_load_config_rejects_non_object(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
