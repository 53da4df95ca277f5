"""Single-record credential cache on local disk."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from onenote_mcp.auth.models import CredentialRecord

logger = logging.getLogger(__name__)


class CredentialCache:
    """Persists one CredentialRecord as a JSON file.

    A missing or unreadable file is "no cached credential", never an error.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> CredentialRecord | None:
        """Read the cached record.

        Returns:
            The record, or None if the file is missing, unreadable, or
            doesn't hold a valid record.
        """
        try:
            data = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No cached token found")
            return None
        except OSError as e:
            logger.warning(f"Could not read credential cache {self.path}: {e}")
            return None

        try:
            record = CredentialRecord.model_validate_json(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid credential cache {self.path}: {e}")
            return None

        logger.info("Token loaded from cache")
        return record

    def save(self, record: CredentialRecord) -> None:
        """Overwrite the cache with `record`.

        Writes a sibling temp file and moves it into place, so a concurrent
        `load` sees either the old record or the new one.

        Raises:
            OSError: If the file can't be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        tmp_path.write_text(record.to_json(), encoding="utf-8")
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)
        logger.info("Token cached")
