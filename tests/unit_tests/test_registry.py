"""
KlarLog facade and CategoryLogger API.
"""

from __future__ import annotations

import pytest

from klarlog.destinations import CallbackDestination, FileDestination
from klarlog.exceptions import DuplicateCategoryError, UnknownCategoryError
from klarlog.levels import LogLevel
from klarlog.registry import CategoryLogger, KlarLog


@pytest.fixture
def klar(recording_destination):
    return KlarLog(
        subsystem="com.example.app",
        categories=["general", "network"],
        destinations={"memory": recording_destination},
    )


class TestLookup:
    def test_attribute_item_and_method_access(self, klar) -> None:
        assert isinstance(klar.network, CategoryLogger)
        assert klar["network"].category == "network"
        assert klar.category("general").subsystem == "com.example.app"

    def test_unknown_category(self, klar) -> None:
        with pytest.raises(UnknownCategoryError) as excinfo:
            klar["storage"]
        assert excinfo.value.code == "UNKNOWN_CATEGORY"
        assert excinfo.value.details["known"] == ["general", "network"]
        assert str(excinfo.value) == "Unknown log category 'storage'"

    def test_unknown_attribute_is_attribute_error(self, klar) -> None:
        assert not hasattr(klar, "storage")
        with pytest.raises(KeyError):
            klar["storage"]

    def test_accessor_mapping(self, recording_destination, recorded) -> None:
        klar = KlarLog("app", {"auth": "authentication"}, [recording_destination])
        klar.auth.info("signed in")
        assert recorded[0].category == "authentication"

    def test_duplicate_category_rejected(self) -> None:
        with pytest.raises(DuplicateCategoryError):
            KlarLog("app", ["general", "general"])

    def test_membership_and_listing(self, klar) -> None:
        assert "network" in klar
        assert "storage" not in klar
        assert klar.categories == ["general", "network"]
        assert [logger.category for logger in klar] == ["general", "network"]


class TestDestinations:
    def test_named_destinations_are_read_only(self, klar, recording_destination) -> None:
        assert klar.destinations["memory"] is recording_destination
        with pytest.raises(TypeError):
            klar.destinations["other"] = recording_destination  # type: ignore[index]

    def test_sequence_destinations_get_names(self, recorded) -> None:
        first = CallbackDestination(recorded.append)
        second = CallbackDestination(recorded.append)
        klar = KlarLog("app", ["c"], [first, second])
        assert list(klar.destinations) == ["CallbackDestination", "CallbackDestination_1"]

    def test_categories_share_destinations(self, klar, recorded) -> None:
        klar.general.info("a")
        klar.network.info("b")
        assert [(r.category, r.message) for r in recorded] == [("general", "a"), ("network", "b")]

    def test_flush_and_close_reach_file_destination(self, log_dir) -> None:
        file_dest = FileDestination(log_dir)
        klar = KlarLog("app", ["general"], {"file": file_dest})
        klar.general.error("persist me")
        assert klar.flush(timeout=5)
        assert file_dest.path.exists()
        klar.close()
        assert not file_dest._worker.is_running


class TestCategoryLogger:
    @pytest.mark.parametrize("level", list(LogLevel))
    def test_level_methods(self, klar, recorded, level) -> None:
        getattr(klar.general, level.value)("message")
        assert recorded[-1].level is level
        assert recorded[-1].message == "message"
        assert recorded[-1].metadata is None

    def test_metadata_mapping_and_fields_merge(self, klar, recorded) -> None:
        klar.network.warning("retry", {"attempt": 2}, url="/health")
        assert recorded[0].metadata == {"attempt": 2, "url": "/health"}

    def test_fields_only(self, klar, recorded) -> None:
        klar.network.info("sent", bytes=512)
        assert recorded[0].metadata.to_json() == '{"bytes":512}'

    def test_log_with_level_name(self, klar, recorded) -> None:
        klar.general.log("notice", "by name")
        assert recorded[0].level is LogLevel.NOTICE
