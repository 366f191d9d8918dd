import json
import os
from loguru import logger
from pathlib import Path
from threading import Lock
from typing import List


class MissingBlockTracker:
    """
    Persists block heights that were skipped during a run so the range can be
    re-run for just those heights later.

    The file holds {"missing_blocks": [...]} in ascending order and is
    rewritten through a temporary file on every change.
    """

    def __init__(self, filepath: str = "missing_blocks.json"):
        self.path = Path(filepath)
        self.lock = Lock()
        self.heights = set(self._load_heights())
        if self.heights:
            logger.info(f"Loaded {len(self.heights)} previously skipped heights from {self.path}")

    def _load_heights(self) -> List[int]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable skipped-height file {self.path}")
            return []
        return [int(height) for height in data.get("missing_blocks", [])]

    def _save_heights(self) -> None:
        if self.path.parent != Path("."):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps({"missing_blocks": sorted(self.heights)}, indent=4))
        os.replace(tmp_path, self.path)

    def add_block(self, block_number: int) -> None:
        with self.lock:
            if block_number in self.heights:
                return
            self.heights.add(block_number)
            self._save_heights()

    def remove_block(self, block_number: int) -> None:
        with self.lock:
            if block_number not in self.heights:
                return
            self.heights.discard(block_number)
            self._save_heights()

    def get_all_blocks(self) -> List[int]:
        with self.lock:
            return sorted(self.heights)
