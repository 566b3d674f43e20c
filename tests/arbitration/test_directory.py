"""Tests for building the eligible arbitrator directory."""

import pytest

from tradenet.arbitration.directory import (
    EligibleDirectory,
    allowed_arbitrators,
    banned_hostnames,
    build_directory,
    index_by_address,
)
from tradenet.arbitration.models import (
    ArbitratorRecord,
    FilterDocument,
    NodeAddress,
    StorageEntry,
)


def _make_record(host: str, port: int = 9999, key: bytes = b"\x02" * 33, **overrides) -> ArbitratorRecord:
    defaults = dict(
        node_address=NodeAddress(host_name=host, port=port),
        registration_pub_key=key,
        languages=["en"],
    )
    defaults.update(overrides)
    return ArbitratorRecord(**defaults)


def _entries(*hosts: str) -> list[StorageEntry]:
    return [StorageEntry(payload=_make_record(h)) for h in hosts]


@pytest.fixture
def captured_warnings(monkeypatch):
    import bittensor as bt

    calls = []
    monkeypatch.setattr(bt.logging, "warning", lambda msg, *a, **kw: calls.append(msg))
    return calls


class TestBuildDirectory:

    def test_banned_hosts_excluded(self):
        filter_doc = FilterDocument(arbitrators=["aaa", "bbb", "ccc"])
        directory = build_directory(_entries("aaa", "bbb", "ddd", "eee"), filter_doc)
        assert directory.hostnames() == {"ddd", "eee"}

    def test_no_filter_keeps_everything(self):
        directory = build_directory(_entries("aaa", "bbb"), None)
        assert directory.hostnames() == {"aaa", "bbb"}

    def test_empty_filter_keeps_everything(self):
        directory = build_directory(_entries("aaa"), FilterDocument())
        assert len(directory) == 1

    def test_empty_store(self):
        directory = build_directory([], FilterDocument(arbitrators=["aaa"]))
        assert len(directory) == 0
        assert directory.hostnames() == set()

    def test_non_arbitrator_payloads_skipped(self):
        entries = [
            StorageEntry(payload={"offer_id": "abc", "amount": 10}),
            StorageEntry(payload="mailbox message"),
            StorageEntry(payload=None),
            StorageEntry(payload=_make_record("ddd")),
        ]
        directory = build_directory(entries)
        assert directory.hostnames() == {"ddd"}

    def test_mapping_payload_interpreted(self):
        payload = {
            "node_address": {"host_name": "fff", "port": 9999},
            "registration_pub_key": b"\x03" * 33,
        }
        directory = build_directory([StorageEntry(payload=payload)])
        address = NodeAddress(host_name="fff", port=9999)
        assert address in directory
        assert directory[address].registration_pub_key == b"\x03" * 33

    def test_duplicate_address_keeps_first(self, captured_warnings):
        first = _make_record("ddd", info="first")
        second = _make_record("ddd", info="second")
        directory = build_directory([StorageEntry(payload=first), StorageEntry(payload=second)])

        assert len(directory) == 1
        assert directory[NodeAddress(host_name="ddd", port=9999)].info == "first"
        assert any(
            isinstance(c, dict) and c["arbitrator_directory"].get("event") == "duplicate_address"
            for c in captured_warnings
        )

    def test_same_host_different_ports_both_kept(self):
        entries = [
            StorageEntry(payload=_make_record("ddd", port=1)),
            StorageEntry(payload=_make_record("ddd", port=2)),
        ]
        directory = build_directory(entries)
        assert len(directory) == 2
        assert directory.hostnames() == {"ddd"}

    def test_no_banned_host_in_result(self):
        banned = ["h3", "h5", "h7"]
        hosts = [f"h{i}" for i in range(10)]
        directory = build_directory(_entries(*hosts), FilterDocument(arbitrators=banned))
        for address in directory:
            assert address.host_name not in banned

    def test_directory_is_snapshot(self):
        entries = _entries("aaa")
        directory = build_directory(entries)
        entries.append(StorageEntry(payload=_make_record("bbb")))
        assert directory.hostnames() == {"aaa"}


class TestBannedHostnames:

    def test_none_filter_is_empty(self, captured_warnings):
        assert banned_hostnames(None) == set()
        assert captured_warnings == []

    def test_non_empty_ban_list_is_logged(self, captured_warnings):
        assert banned_hostnames(FilterDocument(arbitrators=["bbb", "aaa"])) == {"aaa", "bbb"}
        assert captured_warnings == [{"arbitrator_directory": {"banned_arbitrators": ["aaa", "bbb"]}}]

    def test_empty_ban_list_not_logged(self, captured_warnings):
        assert banned_hostnames(FilterDocument()) == set()
        assert captured_warnings == []


class TestHelpers:

    def test_allowed_arbitrators_preserves_order(self):
        result = allowed_arbitrators(_entries("c", "a", "b"), banned={"a"})
        assert [r.host_name for r in result] == ["c", "b"]

    def test_index_by_address(self):
        records = [_make_record("a"), _make_record("b")]
        index = index_by_address(records)
        assert set(index) == {r.node_address for r in records}

    def test_eligible_directory_read_only(self):
        directory = EligibleDirectory({})
        with pytest.raises(TypeError):
            directory[NodeAddress(host_name="a", port=1)] = _make_record("a")  # type: ignore[index]

    def test_records_helper(self):
        directory = build_directory(_entries("a", "b"))
        assert sorted(r.host_name for r in directory.records()) == ["a", "b"]
