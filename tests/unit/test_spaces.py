"""Tests for the space create-or-update handler."""

import pytest

from cluster_stats.backends.base import NamespaceLookupError, NamespaceWriteError
from cluster_stats.server.spaces import put_space


class TestPutSpace:
    def test_writes_then_reads_back(self, backend):
        backend.pds_counts = {"Sales": 9}
        space = put_space(backend, "Sales", {"name": "Sales", "description": "q3"})

        assert space.name == "Sales"
        assert space.id == "id-Sales"
        assert space.description == "q3"
        assert space.dataset_count == 9
        assert [c for c in backend.calls if c[0] != "get_dataset_count"] == [("add_or_update_space", "Sales")]

    def test_version_passed_through(self, backend):
        put_space(backend, "Sales", {"name": "Sales"})
        space = put_space(backend, "Sales", {"id": "id-Sales", "name": "Sales", "version": 0})
        assert space.version == 1

    def test_write_error_propagates(self, backend):
        def reject(path, space):
            raise NamespaceWriteError("stale version")

        backend.add_or_update_space = reject
        with pytest.raises(NamespaceWriteError):
            put_space(backend, "Sales", {"name": "Sales"})

    def test_count_failure_propagates(self, backend):
        backend.failing_pds = {"Sales"}
        with pytest.raises(NamespaceLookupError):
            put_space(backend, "Sales", {"name": "Sales"})

    def test_invalid_payload(self, backend):
        with pytest.raises(ValueError):
            put_space(backend, "Sales", {"description": "no name"})
        assert backend.calls == []
