"""
Flat-file storage: every collection is a JSON array in <DB_PATH>/<name>.json.

Reads are forgiving (a missing or corrupt file is an empty collection),
writes are not (any OSError surfaces as StorageError).
"""
import json
import logging
import os
import tempfile

from utils.exceptions import StorageError

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "users",
    "refresh-tokens",
    "categories",
    "subcategories",
    "cities",
    "skills",
    "likes",
)


class FileStorage:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path

    def init_app(self, app):
        """Bind the storage directory from app.config["DB_PATH"]."""
        self.db_path = app.config["DB_PATH"]
        os.makedirs(self.db_path, exist_ok=True)
        app.extensions["storage"] = self
        logger.info("Database path: %s", self.db_path)

    def path_for(self, name: str) -> str:
        if self.db_path is None:
            raise RuntimeError("FileStorage is not bound to a directory; call init_app() first")
        return os.path.join(self.db_path, f"{name}.json")

    def exists(self, name: str) -> bool:
        return os.path.exists(self.path_for(name))

    def read(self, name: str) -> list:
        """Load a whole collection. Never raises for missing or broken files."""
        path = self.path_for(name)
        if not os.path.exists(path):
            logger.debug("Collection file not found: %s", path)
            return []
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError):
            logger.exception("Failed to read %s", path)
            return []
        if not isinstance(data, list):
            logger.error("Collection %s is not a JSON array, treating as empty", name)
            return []
        logger.debug("Loaded %d records from %s", len(data), name)
        return data

    def write(self, name: str, records: list) -> None:
        """Rewrite a whole collection (temp file + rename)."""
        path = self.path_for(name)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.db_path, prefix=f".{name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError() from exc
        logger.debug("Saved %d records to %s", len(records), name)
