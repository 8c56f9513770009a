"""
Configuration
=============
Parameter defaults, named presets and JSON overrides.

Every engine takes a plain dataclass of parameters. A JSON file may override
any of them, grouped by section::

    {
        "sweep": {"flow_duration": 1.5, "direction": "reverse"},
        "lattice": {"spacing": 16},
        "physics": {"preset": "pie", "push_force": 1.0},
        "sequence": ["barChart", "pieChart"]
    }

Unknown sections or keys raise ``ValueError`` so typos do not go unnoticed.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, TypeVar, Union

from .core.grid_wave import SweepParams
from .core.lattice import LatticeParams
from .core.physics import PhysicsParams
from .core.sequencer import DEFAULT_SEQUENCE

logger = logging.getLogger(__name__)

T = TypeVar("T")

PHYSICS_PRESETS: Dict[str, PhysicsParams] = {
    "delta": PhysicsParams(),
    "pie": PhysicsParams(gravity=0.2, max_scale=2.0, push_force=0.8, damping=0.85, scale_rate=0.1),
}


@dataclass
class Config:
    sweep: SweepParams = field(default_factory=SweepParams)
    lattice: LatticeParams = field(default_factory=LatticeParams)
    physics: PhysicsParams = field(default_factory=PhysicsParams)
    sequence: Tuple[str, ...] = DEFAULT_SEQUENCE


def override(params: T, values: Mapping[str, Any]) -> T:
    """Copy of a params dataclass with ``values`` applied; validation reruns."""
    known = {f.name for f in fields(params)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"unknown {type(params).__name__} keys: {sorted(unknown)}")
    return replace(params, **values)


def physics_preset(name: str) -> PhysicsParams:
    try:
        return replace(PHYSICS_PRESETS[name])
    except KeyError:
        raise ValueError(f"unknown physics preset {name!r}; choose from {sorted(PHYSICS_PRESETS)}") from None


def config_from_dict(data: Mapping[str, Any]) -> Config:
    unknown = set(data) - {"sweep", "lattice", "physics", "sequence"}
    if unknown:
        raise ValueError(f"unknown config sections: {sorted(unknown)}")
    cfg = Config()
    cfg.sweep = override(cfg.sweep, data.get("sweep", {}))
    cfg.lattice = override(cfg.lattice, data.get("lattice", {}))

    physics = dict(data.get("physics", {}))
    base = physics_preset(physics.pop("preset")) if "preset" in physics else cfg.physics
    cfg.physics = override(base, physics)

    if "sequence" in data:
        seq = data["sequence"]
        if isinstance(seq, str) or not seq:
            raise ValueError("sequence must be a non-empty list of shape names")
        cfg.sequence = tuple(str(s) for s in seq)
    return cfg


def load_config(path: Union[str, Path]) -> Config:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be an object")
    logger.info("Loaded config from %s", path)
    return config_from_dict(data)
