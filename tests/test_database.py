"""Tests for the store seam (database.py)."""

import pytest
from bson.errors import InvalidDocument
from pymongo.errors import AutoReconnect, OperationFailure

from database import serialize, store_errors
from errors import StoreError, StoreUnavailable


class TestStoreErrors:
    @pytest.mark.parametrize(
        "error",
        [
            OperationFailure("write failed"),
            InvalidDocument("cannot encode object"),
            OverflowError("MongoDB can only handle up to 8-byte ints"),
        ],
    )
    def test_driver_failures_carry_operation_message(self, error):
        with pytest.raises(StoreError) as exc:
            with store_errors("Failed to create order"):
                raise error

        assert exc.value.message == "Failed to create order"
        assert not isinstance(exc.value, StoreUnavailable)

    def test_connection_failures(self):
        with pytest.raises(StoreUnavailable) as exc:
            with store_errors("Failed to fetch courses"):
                raise AutoReconnect("connection reset")
        assert exc.value.message == "Failed to fetch courses"

    def test_other_errors_pass_through(self):
        with pytest.raises(KeyError):
            with store_errors("Failed to fetch courses"):
                raise KeyError("title")


def test_serialize_stringifies_object_id(database):
    inserted = database["courses"].insert_one({"title": "Yoga"}).inserted_id
    doc = serialize(database["courses"].find_one({}))
    assert doc == {"_id": str(inserted), "title": "Yoga"}
