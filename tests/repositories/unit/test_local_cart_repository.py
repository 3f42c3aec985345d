"""
Unit Tests: LocalCartRepository

Tests the device-local cart file used for anonymous sessions.

Run with:
    pytest tests/repositories/unit/test_local_cart_repository.py -v
"""

import json

import pytest

from exceptions.storage import StorageUnavailableException
from models.cart import StoredCartLineDTO, StoredCustomizationDTO
from repositories.local_cart import LocalCartRepository


class TestLocalCartRepository:

    def test_missing_file_reads_as_empty(self, local_storage):
        assert local_storage.read() == []

    def test_write_uses_persisted_record_shape(self, local_storage):
        local_storage.write([
            StoredCartLineDTO(line_id="a1", item_id=4, quantity=2, customization=StoredCustomizationDTO(
                selections={"spice_level": "mild"}, special_instructions="Less salt"
            )),
            StoredCartLineDTO(line_id="b2", item_id=2, quantity=1),
        ])

        assert json.loads(local_storage.path.read_text(encoding="utf-8")) == [
            {"lineId": "a1", "itemId": 4, "quantity": 2,
             "customization": {"selections": {"spice_level": "mild"}, "specialInstructions": "Less salt"}},
            {"lineId": "b2", "itemId": 2, "quantity": 1},
        ]
        assert [record.line_id for record in local_storage.read()] == ["a1", "b2"]

    def test_write_creates_parent_directories(self, tmp_path):
        storage = LocalCartRepository(tmp_path / "device" / "storage" / "cart.json")

        storage.write([StoredCartLineDTO(item_id=1, quantity=1)])

        assert storage.path.exists()
        assert not storage.path.with_name("cart.json.tmp").exists()

    def test_non_list_content_reads_as_empty(self, local_storage):
        local_storage.path.write_text(json.dumps({"itemId": 1, "quantity": 1}), encoding="utf-8")

        assert local_storage.read() == []

    def test_clear_is_idempotent(self, local_storage):
        local_storage.write([StoredCartLineDTO(item_id=1, quantity=1)])

        local_storage.clear()
        local_storage.clear()

        assert not local_storage.path.exists()

    def test_unreadable_location_raises(self, tmp_path):
        storage = LocalCartRepository(tmp_path)  # a directory, not a file

        with pytest.raises(StorageUnavailableException) as exc_info:
            storage.read()

        assert exc_info.value.store == "local"
