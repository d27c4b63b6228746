from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

from eu2rl_app.domain.models import RunConfig

logger = logging.getLogger(__name__)

_NOT_SLUG = re.compile(r"[^a-z0-9_]+")


def config_slug(name: str) -> str:
    """'My Run!' -> 'my-run'; an empty result falls back to 'run'."""
    return _NOT_SLUG.sub("-", name.strip().lower()).strip("-") or "run"


def _major(version: str) -> int:
    head = str(version).split(".", 1)[0]
    return int(head) if head.isdigit() else 0


class LocalConfigStore:
    """Named RunConfig files under one directory (``<base_dir>/<slug>.json``).

    Each file records the schema version it was written with. Loading a file
    from a newer major version is refused rather than silently dropping fields.
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = Path(base_dir or Path.cwd() / "configs").resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def list(self) -> List[str]:
        return sorted(p.stem for p in self.base_dir.glob("*.json"))

    def path_for(self, name: str) -> Path:
        return self.base_dir / f"{config_slug(name)}.json"

    def save(self, name: str, cfg: RunConfig) -> Path:
        path = self.path_for(name)
        payload: Dict[str, Any] = {"schema_version": cfg.version, **cfg.model_dump(mode="json")}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Stored run configuration %s", path)
        return path

    def load(self, name: str) -> RunConfig:
        path = self.path_for(name)
        if not path.is_file():
            known = ", ".join(self.list()) or "none"
            raise FileNotFoundError(f"No stored configuration '{name}' in {self.base_dir} (stored: {known})")
        payload = json.loads(path.read_text(encoding="utf-8"))
        stored = str(payload.pop("schema_version", payload.get("version", "0")))
        if _major(stored) > _major(RunConfig().version):
            raise ValueError(f"{path.name} was written by a newer schema ({stored})")
        return RunConfig.model_validate(payload)

    def remove(self, name: str) -> bool:
        """Delete a stored configuration; False when there was nothing to delete."""
        path = self.path_for(name)
        if not path.is_file():
            return False
        path.unlink()
        return True
