from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# packaged card catalog and its schemas live next to this module
_PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class Paths:
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path

    @property
    def telemetry_file(self) -> Path:
        return self.userdata_dir / "telemetry.jsonl"


def get_paths(userdata_dir: Path | None = None) -> Paths:
    """Resolve content and userdata locations.

    Userdata defaults to ``<checkout>/userdata`` (src/triadtcg -> repo root).
    """
    data_dir = _PACKAGE_DIR / "data"
    return Paths(
        data_dir=data_dir,
        schema_dir=data_dir / "schemas",
        userdata_dir=userdata_dir if userdata_dir is not None else _PACKAGE_DIR.parents[1] / "userdata",
    )
