import json
import logging
import os

logger = logging.getLogger(__name__)


def snapshot_path(name: str) -> str:
    snapshot_dir = os.getenv("SNAPSHOT_DIR") or os.path.join(os.getcwd(), "public")
    return os.path.join(snapshot_dir, f"{name}.json")


def load_snapshot(name: str) -> dict:
    """Read ``<SNAPSHOT_DIR>/<name>.json``; the snapshots are never written."""
    path = snapshot_path(name)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or not isinstance(data.get(name), list):
        raise ValueError(f"Snapshot {path} has no '{name}' list")
    return data
