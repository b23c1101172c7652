import threading

import pytest

from txindex.apps.ingest.config import IngestConfig
from txindex.apps.ingest.engine import EngineState, IngestEngine
from txindex.apps.ingest.errors import BackfillFailed, SourceUnavailable, StoreUnavailable
from txindex.apps.ingest.factories import TransactionFactory
from txindex.apps.ingest.types import AmountRecord, Block, Checkpoint


def make_block(round_number, amount=10, kind="txfer"):
    return Block(round=round_number, transactions=(
        TransactionFactory(signature=f"r{round_number}", amount=amount, kind=kind),
    ))


@pytest.fixture
def config():
    return IngestConfig(poll_interval=0.001, persist_every=10)


def run_in_thread(engine):
    outcome = {}

    def target():
        try:
            outcome["checkpoint"] = engine.run()
        except Exception as e:  # surfaced to the test below
            outcome["error"] = e

    worker = threading.Thread(target=target)
    worker.start()
    return worker, outcome


def test_resumes_from_stored_checkpoint_and_saves_on_stop(gateway, sink, store, config):
    store.stored = Checkpoint(last_processed_round=3, txn_count=1, total_amount=5,
                              min_amount=AmountRecord(5, 2), max_amount=AmountRecord(5, 2))
    for r in range(1, 7):
        gateway.add_block(make_block(r, amount=r))
    engine = IngestEngine(gateway, sink, store, config)
    engine.stop()

    checkpoint = engine.run()

    # Backfill was cancelled before its first round; nothing before round 4 is refetched
    assert engine.state == EngineState.TERMINATED
    assert engine.backfill_result.cancelled
    assert checkpoint.last_processed_round == 3
    assert store.saved_rounds == [3]


def test_full_run_backfills_polls_and_drains(gateway, sink, store, config):
    for r in range(1, 4):
        gateway.add_block(make_block(r, amount=r * 100))
    engine = IngestEngine(gateway, sink, store, config)

    worker, outcome = run_in_thread(engine)
    # Rounds produced after startup are picked up by the live loop
    for r in range(4, 13):
        gateway.blocks[r] = make_block(r, amount=r * 100)

    for _ in range(500):
        if engine.checkpoint is not None and engine.checkpoint.last_processed_round == 12:
            break
        threading.Event().wait(0.01)
    engine.stop()
    worker.join(timeout=5)

    assert not worker.is_alive()
    assert "error" not in outcome
    checkpoint = outcome["checkpoint"]
    assert checkpoint.last_processed_round == 12
    assert checkpoint.txn_count == 12
    assert checkpoint.total_amount == sum(r * 100 for r in range(1, 13))
    assert checkpoint.min_amount == AmountRecord(100, 1)
    assert checkpoint.max_amount == AmountRecord(1200, 12)
    assert engine.backfill_result.processed == [1, 2, 3]
    # Periodic save at round 10, then the final save
    assert store.saved_rounds == [10, 12]
    assert engine.state == EngineState.TERMINATED


def test_frontier_failure_saves_then_fails(gateway, sink, store, config):
    store.stored = Checkpoint(last_processed_round=7)
    gateway.frontier_error = SourceUnavailable("status endpoint down")
    engine = IngestEngine(gateway, sink, store, config)

    with pytest.raises(BackfillFailed) as exc_info:
        engine.run()

    assert isinstance(exc_info.value.__cause__, SourceUnavailable)
    assert store.saved_rounds == [7]
    assert engine.state == EngineState.TERMINATED


def test_frontier_failure_with_store_down_raises_store_error(gateway, sink, store, config):
    gateway.frontier_error = SourceUnavailable("status endpoint down")
    store.fail_save = True
    engine = IngestEngine(gateway, sink, store, config)

    with pytest.raises(StoreUnavailable):
        engine.run()


def test_load_failure_is_fatal(gateway, sink, store, config):
    store.fail_load = True
    engine = IngestEngine(gateway, sink, store, config)

    with pytest.raises(StoreUnavailable):
        engine.run()
    assert engine.state == EngineState.LOADING
    assert gateway.fetched == []


def test_final_save_failure_is_fatal(gateway, sink, store, config):
    gateway.add_block(make_block(1))
    store.fail_save = True
    engine = IngestEngine(gateway, sink, store, config)
    engine.stop()

    with pytest.raises(StoreUnavailable):
        engine.run()
    assert engine.state == EngineState.TERMINATED



def test_unexpected_error_during_backfill_saves_progress(gateway, sink, store, config):
    store.stored = Checkpoint(last_processed_round=3)
    gateway.add_block(make_block(4, amount=40))
    gateway.frontier = 5
    gateway.errors[5] = AttributeError("'list' object has no attribute 'get'")
    engine = IngestEngine(gateway, sink, store, config)

    with pytest.raises(AttributeError):
        engine.run()

    assert store.saved_rounds == [4]
    assert store.stored.total_amount == 40
    assert engine.state == EngineState.TERMINATED


def test_unexpected_error_while_polling_saves_progress(gateway, sink, store, config):
    gateway.add_block(make_block(1))
    # Produced after the frontier was read, so only the live loop sees it
    gateway.blocks[2] = make_block(2)
    engine = IngestEngine(gateway, sink, store, config)
    fold = engine.processor.fold

    def fold_or_explode(block, checkpoint):
        if block.round == 2:
            raise RuntimeError("fold exploded")
        return fold(block, checkpoint)

    engine.processor.fold = fold_or_explode

    with pytest.raises(RuntimeError):
        engine.run()

    assert engine.backfill_result.processed == [1]
    assert store.saved_rounds == [1]
    assert engine.state == EngineState.TERMINATED

def test_engine_uses_configured_kind(gateway, sink, store):
    gateway.add_block(Block(round=1, transactions=(
        TransactionFactory(signature="a", kind="txfer", amount=1),
        TransactionFactory(signature="b", kind="pay", amount=2),
    )))
    engine = IngestEngine(gateway, sink, store, IngestConfig(qualifying_kind="pay", poll_interval=0.001))

    worker, outcome = run_in_thread(engine)
    for _ in range(500):
        if engine.backfill_result is not None:
            break
        threading.Event().wait(0.01)
    engine.stop()
    worker.join(timeout=5)

    assert outcome["checkpoint"].txn_count == 1
    assert outcome["checkpoint"].total_amount == 2
    assert list(sink.records) == ["b"]
