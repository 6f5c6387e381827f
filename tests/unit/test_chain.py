"""Tests for the in-memory chain: identities, events and savepoints."""

import pytest

from pairdex.assets import StandardAsset
from pairdex.chain import Stateful
from pairdex.errors import IdentityCollision, UnknownContract
from pairdex.models.events import Approval, Transfer
from tests.helpers import (
    ALICE,
    BOB,
    DEPLOYER,
    GENESIS_TIMESTAMP,
    deploy_asset,
    fund,
    make_chain,
    make_pool_with_assets,
)


class TestIdentities:
    def test_deterministic_per_deployer(self, chain):
        other = make_chain()
        assert chain.next_identity(DEPLOYER) == other.next_identity(DEPLOYER)
        assert chain.next_identity(DEPLOYER) == other.next_identity(DEPLOYER)

    def test_fresh_each_call(self, chain):
        assert chain.next_identity(DEPLOYER) != chain.next_identity(DEPLOYER)

    def test_depends_on_deployer(self, chain):
        assert chain.next_identity(DEPLOYER) != chain.next_identity(ALICE)

    def test_collision_rejected(self, chain):
        asset = deploy_asset(chain, "AAA")

        with pytest.raises(IdentityCollision):
            chain.deploy(StandardAsset(chain, asset.address, name="Dup", symbol="DUP"))

    def test_unknown_contract(self, chain):
        with pytest.raises(UnknownContract):
            chain.get_contract("0x" + "99" * 20)
        assert not chain.has_contract("0x" + "99" * 20)


class TestTime:
    def test_starts_at_genesis(self, chain):
        assert chain.block_timestamp == GENESIS_TIMESTAMP

    def test_advance(self, chain):
        assert chain.advance_time(10) == GENESIS_TIMESTAMP + 10

    def test_cannot_go_backwards(self, chain):
        with pytest.raises(ValueError):
            chain.advance_time(-1)


class TestEvents:
    def test_events_of_filters_kind_and_emitter(self, chain):
        first = deploy_asset(chain, "AAA")
        second = deploy_asset(chain, "BBB")
        first.mint(ALICE, 5)
        second.mint(ALICE, 7)
        first.approve(ALICE, BOB, 1)

        assert [e.value for e in chain.events_of(Transfer)] == [5, 7]
        assert [e.value for e in chain.events_of(Transfer, emitter=second.address)] == [7]
        assert chain.events_of(Approval) == [Approval(first.address, ALICE, BOB, 1)]

    def test_to_dict(self, chain):
        event = Transfer("0x" + "01" * 20, ALICE, BOB, 3)

        assert event.to_dict() == {
            "event": "Transfer",
            "emitter": "0x" + "01" * 20,
            "sender": ALICE,
            "recipient": BOB,
            "value": 3,
        }


class TestAtomic:
    def test_failure_restores_state_and_events(self, chain):
        asset = deploy_asset(chain, "AAA")
        asset.mint(ALICE, 100)
        events_before = chain.events

        with pytest.raises(RuntimeError):
            with chain.atomic():
                asset.transfer(ALICE, BOB, 60)
                raise RuntimeError("abort")

        assert asset.balance_of(ALICE) == 100
        assert asset.balance_of(BOB) == 0
        assert chain.events == events_before

    def test_failure_removes_contracts_deployed_inside(self, chain):
        with pytest.raises(RuntimeError):
            with chain.atomic():
                asset = deploy_asset(chain, "AAA")
                raise RuntimeError("abort")

        assert not chain.has_contract(asset.address)
        # The identity counter is rolled back as well
        assert deploy_asset(chain, "AAA").address == asset.address

    def test_inner_failure_caught_keeps_outer_changes(self, chain):
        asset = deploy_asset(chain, "AAA")
        asset.mint(ALICE, 100)

        with chain.atomic():
            asset.transfer(ALICE, BOB, 10)
            with pytest.raises(RuntimeError):
                with chain.atomic():
                    asset.transfer(ALICE, BOB, 20)
                    raise RuntimeError("inner")

        assert asset.balance_of(ALICE) == 90
        assert asset.balance_of(BOB) == 10

    def test_depth(self, chain):
        assert chain.depth == 0
        with chain.atomic():
            assert chain.depth == 1
            with chain.atomic():
                assert chain.depth == 2
        assert chain.depth == 0

    def test_success_keeps_changes(self, chain):
        asset = deploy_asset(chain, "AAA")

        with chain.atomic():
            asset.mint(ALICE, 1)

        assert asset.balance_of(ALICE) == 1

    def test_outer_failure_after_inner_rollback_restores_original(self, chain):
        asset = deploy_asset(chain, "AAA")
        asset.mint(ALICE, 100)

        with pytest.raises(RuntimeError, match="outer"):
            with chain.atomic():
                with pytest.raises(RuntimeError, match="inner"):
                    with chain.atomic():
                        asset.transfer(ALICE, BOB, 30)
                        raise RuntimeError("inner")
                asset.transfer(ALICE, BOB, 50)
                raise RuntimeError("outer")

        assert asset.balance_of(ALICE) == 100
        assert asset.balance_of(BOB) == 0

    def test_outer_failure_undoes_committed_inner_deployment(self, chain):
        with pytest.raises(RuntimeError):
            with chain.atomic():
                with chain.atomic():
                    asset = deploy_asset(chain, "AAA")
                    asset.mint(ALICE, 5)
                raise RuntimeError("abort")

        assert not chain.has_contract(asset.address)
        assert chain.events == ()


def snapshotted_during_swap(monkeypatch, unrelated_pairs: int) -> list[str | None]:
    """Identities snapshotted by one swap on a chain holding extra unrelated pairs."""
    chain = make_chain()
    registry, pool, asset0, asset1 = make_pool_with_assets(chain)
    for i in range(unrelated_pairs):
        registry.create_pair(
            DEPLOYER, deploy_asset(chain, f"X{i}").address, deploy_asset(chain, f"Y{i}").address
        )
    fund(asset0, ALICE, 3000, spender=pool.address)
    fund(asset1, ALICE, 6000, spender=pool.address)
    pool.mint(ALICE, ALICE, 3000, 6000)
    fund(asset0, BOB, 1000, spender=pool.address)

    snapshotted = []
    original = Stateful.snapshot

    def recording_snapshot(self):
        snapshotted.append(getattr(self, "address", None))
        return original(self)

    monkeypatch.setattr(Stateful, "snapshot", recording_snapshot)
    pool.swap(BOB, BOB, 0, 100)
    monkeypatch.setattr(Stateful, "snapshot", original)

    assert set(snapshotted) <= {pool.address, asset0.address, asset1.address}
    return snapshotted


class TestSavepointJournal:
    def test_swap_cost_independent_of_unrelated_pools(self, monkeypatch):
        """Only the contracts a swap touches are copied, however many pools exist."""
        alone = snapshotted_during_swap(monkeypatch, unrelated_pairs=0)
        crowded = snapshotted_during_swap(monkeypatch, unrelated_pairs=25)

        assert len(crowded) == len(alone)

    def test_first_touch_snapshots_once_for_all_open_savepoints(self, chain, monkeypatch):
        asset = deploy_asset(chain, "AAA")
        asset.mint(ALICE, 100)
        calls = []
        original = Stateful.snapshot

        def counting_snapshot(self):
            calls.append(self)
            return original(self)

        monkeypatch.setattr(Stateful, "snapshot", counting_snapshot)
        with chain.atomic():
            with chain.atomic():
                asset.transfer(ALICE, BOB, 1)

        # The asset and its nested ledger, shared by all three savepoints
        assert calls == [asset, asset.ledger]

    def test_no_journal_outside_savepoints(self, chain, monkeypatch):
        asset = deploy_asset(chain, "AAA")
        monkeypatch.setattr(Stateful, "snapshot", lambda self: pytest.fail("snapshot taken"))

        chain.journal(asset)
