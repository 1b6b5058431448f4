from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Union

from .models import Disk, HullResult


PathLike = Union[str, Path]


def disks_from_data(data) -> List[Disk]:
    """Build disks from a list of ``{x, y, r}`` or ``{"radius": r, "disks": [...]}``."""
    radius = None
    items = data
    if isinstance(data, dict):
        radius = data.get("radius")
        items = data.get("disks")
    if not isinstance(items, list):
        raise ValueError("Expected a list of disks or an object with a 'disks' list")

    disks = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"Disk {index} is not an object")
        try:
            r = item.get("r", radius)
            disks.append(Disk(float(item["x"]), float(item["y"]), float(r)))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Disk {index} needs numeric x, y and r") from exc
    return disks


def load_disks(path: PathLike) -> List[Disk]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return disks_from_data(data)


def save_disks(disks: Iterable[Disk], path: PathLike) -> None:
    payload = [d.to_dict() for d in disks]
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")


def save_report(result: HullResult, path: PathLike, unit_size: float = 1.0) -> None:
    Path(path).write_text(json.dumps(result.to_dict(unit_size), indent=2), encoding="utf-8")
