import json
import logging
import os
from pathlib import Path

from exceptions.storage import StorageUnavailableException
from models.cart import StoredCartLineDTO, parse_cart_records, dump_cart_records

logger = logging.getLogger(__name__)


class LocalCartRepository:
    """
    Anonymous cart stored on the device as a JSON file.

    Unlike the database repositories this one is bound to a location, so it is
    instantiated once per device/session:

        local_storage = LocalCartRepository(config.LOCAL_CART_PATH)
    """

    STORE_NAME = "local"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> list[StoredCartLineDTO]:
        """
        Read the stored cart.

        Returns:
            Stored lines in cart order; empty when nothing is stored or the
            file holds invalid JSON

        Raises:
            StorageUnavailableException: If the file exists but cannot be read
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageUnavailableException(self.STORE_NAME, str(e))

        try:
            raw_records = json.loads(content) if content.strip() else []
        except json.JSONDecodeError as e:
            logger.error(f"Error loading cart from {self.path}: {e}")
            return []
        return parse_cart_records(raw_records)

    def write(self, records: list[StoredCartLineDTO]) -> None:
        """
        Replace the stored cart.

        Writes to a temporary file first so a failed write never leaves a
        half-written cart behind.

        Raises:
            StorageUnavailableException: If the location is not writable
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(dump_cart_records(records), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageUnavailableException(self.STORE_NAME, str(e))

    def clear(self) -> None:
        """
        Raises:
            StorageUnavailableException: If the stored cart cannot be removed
        """
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableException(self.STORE_NAME, str(e))
