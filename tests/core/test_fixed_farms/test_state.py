"""Tests for farm_admin/core/fixed_farms/state.py — state construction and serialization."""

import pytest

from farm_admin.core.fixed_farms import (
    FixedFarmState,
    initial_state,
    register,
    state_from_dict,
    state_to_dict,
    update,
)


class TestInitialState:
    def test_empty(self):
        s = initial_state()
        assert isinstance(s, FixedFarmState)
        assert dict(s.farms) == {}
        assert s.fixed_pids == ()
        assert s.total_fixed_percentage == 0

    def test_frozen(self):
        s = initial_state()
        with pytest.raises(AttributeError):
            s.total_fixed_percentage = 1  # type: ignore


class TestRoundTrip:
    def test_initial_state_round_trip(self):
        s = initial_state()
        assert state_from_dict(state_to_dict(s)) == s

    def test_preserves_index_order_and_inactive_records(self):
        s = initial_state()
        for pid in (4, 2, 9, 6):
            s = register(s, pid, 100 * pid, pool_count=10)
        s = update(s, 2, 0, pool_count=10)
        d = state_to_dict(s)
        assert d["fixed_pids"] == [4, 6, 9]
        assert [f["pool_id"] for f in d["farms"]] == [2, 4, 6, 9]
        s2 = state_from_dict(d)
        assert s2 == s
        assert s2.fixed_pids == (4, 6, 9)


class TestDecodeErrors:
    def test_missing_field(self):
        with pytest.raises(KeyError):
            state_from_dict({"farms": [], "fixed_pids": []})

    def test_bool_is_not_int(self):
        with pytest.raises(TypeError):
            state_from_dict({"farms": [], "fixed_pids": [True], "total_fixed_percentage": 0})

    def test_non_bool_active_flag(self):
        d = {
            "farms": [{"pool_id": 1, "allocation_percent": 10, "is_active": 1}],
            "fixed_pids": [1],
            "total_fixed_percentage": 10,
        }
        with pytest.raises(TypeError):
            state_from_dict(d)

    def test_duplicate_record(self):
        rec = {"pool_id": 1, "allocation_percent": 10, "is_active": True}
        with pytest.raises(ValueError):
            state_from_dict({"farms": [rec, rec], "fixed_pids": [1], "total_fixed_percentage": 10})
