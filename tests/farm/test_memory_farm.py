"""Tests for farm_admin/farm/memory.py — in-memory reward distributor."""

import pytest

from farm_admin.farm import (
    ACC_REWARD_SCALE,
    DuplicatePool,
    FarmAdapter,
    FarmError,
    InMemoryFarm,
    SupportsCheckpoint,
    UnknownPool,
)

CONTROLLER = "0x" + "cc" * 20
BASE_TOKEN = "0x" + "b0" * 20


def _token(i: int) -> str:
    return "0x" + f"{i:040x}"


def _farm(**kwargs) -> InMemoryFarm:
    return InMemoryFarm(controller=CONTROLLER, base_token=BASE_TOKEN, **kwargs)


def test_satisfies_protocols():
    farm = _farm()
    assert isinstance(farm, FarmAdapter)
    assert isinstance(farm, SupportsCheckpoint)


def test_initial_base_pool():
    farm = _farm()
    assert farm.pool_count() == 1
    assert farm.pool_info(0).token == BASE_TOKEN
    assert farm.pool_info(0).weight == 1000
    assert farm.total_weight() == 1000


def test_add_rederives_base_pool():
    farm = _farm()
    farm.add_pool(300, _token(1), False)
    assert farm.pool_info(0).weight == 100
    assert farm.total_weight() == 400
    farm.add_pool(301, _token(2), False)
    assert farm.pool_info(0).weight == 601 // 3
    assert farm.total_weight() == 601 + 200


def test_set_pool_weight_updates_total():
    farm = _farm()
    farm.add_pool(300, _token(1), False)
    farm.add_pool(600, _token(2), False)
    farm.set_pool_weight(1, 0, False)
    assert farm.pool_info(1).weight == 0
    assert farm.pool_info(0).weight == 200
    assert farm.total_weight() == 800


def test_base_kept_when_others_zero():
    farm = _farm()
    farm.add_pool(0, _token(1), False)
    assert farm.pool_info(0).weight == 1000
    assert farm.total_weight() == 1000


def test_duplicate_token_rejected():
    farm = _farm()
    farm.add_pool(10, _token(1), False)
    with pytest.raises(DuplicatePool):
        farm.add_pool(10, _token(1), False)
    with pytest.raises(DuplicatePool):
        farm.add_pool(10, BASE_TOKEN, False)


def test_unknown_pool():
    farm = _farm()
    with pytest.raises(UnknownPool):
        farm.pool_info(1)
    with pytest.raises(UnknownPool):
        farm.set_pool_weight(3, 1, False)


def test_negative_weight_rejected():
    farm = _farm()
    with pytest.raises(FarmError):
        farm.add_pool(-1, _token(1), False)


def test_reward_accrual():
    farm = _farm(reward_per_block=1000, multiplier=2)
    farm.add_pool(300, _token(1), False)  # base 100, total 400
    farm.stake(1, 10)
    farm.advance_blocks(5)
    expected_reward = 5 * 2 * 1000 * 300 // 400
    assert farm.pending_reward(1, 10) == 10 * (expected_reward * ACC_REWARD_SCALE // 10) // ACC_REWARD_SCALE
    farm.recompute_pool(1)
    info = farm.pool_info(1)
    assert info.last_reward_block == 5
    assert info.acc_reward_per_share == expected_reward * ACC_REWARD_SCALE // 10


def test_recompute_without_stake_only_moves_clock():
    farm = _farm()
    farm.add_pool(300, _token(1), False)
    farm.advance_blocks(3)
    farm.recompute_all_pools()
    assert farm.pool_info(1).acc_reward_per_share == 0
    assert farm.pool_info(1).last_reward_block == 3


def test_multiplier_and_control():
    farm = _farm()
    farm.set_reward_multiplier(4)
    assert farm.multiplier == 4
    farm.transfer_control("0x" + "dd" * 20)
    assert farm.controller == "0x" + "dd" * 20


def test_checkpoint_rollback():
    farm = _farm()
    farm.add_pool(300, _token(1), False)
    token = farm.checkpoint()
    farm.add_pool(600, _token(2), False)
    farm.set_pool_weight(1, 5, False)
    farm.set_reward_multiplier(3)
    farm.rollback(token)
    assert farm.pool_count() == 2
    assert farm.pool_info(1).weight == 300
    assert farm.total_weight() == 400
    assert farm.multiplier == 1
