"""Integration tests for the SQLAlchemy load record repository"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from velocity_limits.domain.exceptions import StoreReadError, StoreWriteError
from velocity_limits.domain.velocity import VelocityEvaluator
from velocity_limits.infrastructure.database.repositories import LoadRecordRepository, from_cents, to_cents
from velocity_limits.infrastructure.database.session import build_engine, init_db
from velocity_limits.service import process_batch

MONDAY = datetime(2000, 1, 3, tzinfo=timezone.utc)
TUESDAY = MONDAY + timedelta(days=1)


@pytest.fixture
def repository(db: Session) -> LoadRecordRepository:
    return LoadRecordRepository(db)


def test_cents_conversion():
    assert to_cents(Decimal("3318.47")) == 331847
    assert to_cents(Decimal("5000")) == 500000
    assert from_cents(331847) == Decimal("3318.47")
    with pytest.raises(ValueError):
        to_cents(Decimal("0.001"))


def test_exists_after_save(repository, make_record):
    repository.save(make_record(load_id=15887, customer_id=528))

    assert repository.exists(15887, 528) is True
    assert repository.exists(15887, 529) is False


def test_range_is_half_open(repository, make_record):
    repository.save(make_record(load_id=1, amount="10", time=MONDAY))
    repository.save(make_record(load_id=2, amount="20", time=TUESDAY - timedelta(seconds=1)))
    repository.save(make_record(load_id=3, amount="40", time=TUESDAY))

    assert repository.count_accepted(528, MONDAY, TUESDAY) == 2
    assert repository.sum_accepted(528, MONDAY, TUESDAY) == Decimal("30")


def test_sum_is_exact(repository, make_record):
    repository.save(make_record(load_id=1, amount="0.10"))
    repository.save(make_record(load_id=2, amount="0.20"))

    assert repository.sum_accepted(528, MONDAY, TUESDAY) == Decimal("0.30")


def test_sum_is_zero_without_matches(repository, make_record):
    repository.save(make_record(load_id=1, amount="50", accepted=False))
    repository.save(make_record(load_id=2, customer_id=999, amount="50"))

    assert repository.sum_accepted(528, MONDAY, TUESDAY) == Decimal("0")
    assert repository.count_accepted(528, MONDAY, TUESDAY) == 0


def test_offset_times_are_stored_in_utc(repository, make_record):
    """Monday 21:00 at -05:00 is Tuesday 02:00 UTC"""
    local = datetime(2000, 1, 3, 21, 0, tzinfo=timezone(timedelta(hours=-5)))
    repository.save(make_record(load_id=1, time=local))

    assert repository.count_accepted(528, MONDAY, TUESDAY) == 0
    assert repository.count_accepted(528, TUESDAY, TUESDAY + timedelta(days=1)) == 1


def test_duplicate_save_fails_and_session_recovers(repository, make_record):
    repository.save(make_record(load_id=1, amount="10"))

    with pytest.raises(StoreWriteError):
        repository.save(make_record(load_id=1, amount="20"))

    repository.save(make_record(load_id=2, amount="5"))
    assert repository.sum_accepted(528, MONDAY, TUESDAY) == Decimal("15")


def test_sub_cent_amount_cannot_be_saved(repository, make_record):
    with pytest.raises(StoreWriteError):
        repository.save(make_record(load_id=1, amount="0.005"))

    assert repository.exists(1, 528) is False


def test_read_failure_raises_store_read_error(repository, db):
    error = OperationalError("SELECT", {}, Exception("database is locked"))
    with patch.object(db, "query", side_effect=error):
        with pytest.raises(StoreReadError):
            repository.count_accepted(528, MONDAY, TUESDAY)
        with pytest.raises(StoreReadError):
            repository.sum_accepted(528, MONDAY, TUESDAY)
        with pytest.raises(StoreReadError):
            repository.exists(1, 528)


def test_read_failure_rolls_back_session(repository, db):
    error = OperationalError("SELECT", {}, Exception("server closed the connection"))
    with patch.object(db, "rollback", wraps=db.rollback) as rollback:
        with patch.object(db, "query", side_effect=error):
            with pytest.raises(StoreReadError):
                repository.exists(1, 528)

    rollback.assert_called_once()


def test_lost_connection_skips_only_the_affected_load(tmp_path, make_request):
    """A broken connection fails one request; the batch carries on with a fresh one"""
    engine = build_engine(f"sqlite:///{tmp_path / 'loads.db'}")
    init_db(bind=engine)
    with Session(engine) as session:
        repository = LoadRecordRepository(session)
        repository.exists(0, 0)
        session.connection().invalidate()

        result = process_batch(
            [make_request(load_id=i) for i in (1, 2, 3)],
            VelocityEvaluator(repository),
        )
    engine.dispose()

    assert [s.id for s in result.skipped] == [1]
    assert [(r.id, r.accepted) for r in result.responses] == [("2", True), ("3", True)]


def test_history_newest_first_with_utc_times(repository, make_record):
    repository.save(make_record(load_id=1, amount="1.50", time=MONDAY.replace(hour=8)))
    repository.save(make_record(load_id=2, amount="2.25", time=MONDAY.replace(hour=10), accepted=False))

    records = repository.history(528)

    assert [r.id for r in records] == [2, 1]
    assert records[0].accepted is False
    assert records[1].amount == Decimal("1.50")
    assert records[1].time == MONDAY.replace(hour=8)


def test_evaluator_against_database(repository, make_request):
    """Daily amount limit enforced through real SQL aggregates"""
    evaluator = VelocityEvaluator(repository)

    first = evaluator.evaluate(make_request(load_id=1, amount="4899"))
    second = evaluator.evaluate(make_request(load_id=2, amount="100"))
    third = evaluator.evaluate(make_request(load_id=3, amount="1"))
    duplicate = evaluator.evaluate(make_request(load_id=3, amount="1"))

    assert first.accepted is True
    assert second.accepted is True
    # 4999 + 1 reaches the 5000 daily limit
    assert third.accepted is False
    assert duplicate is None
    assert len(repository.history(528)) == 3


def test_sub_cent_load_gets_same_decision_from_both_stores(repository, store, make_request):
    request = make_request(load_id=1, amount="0.005")

    in_memory = VelocityEvaluator(store).evaluate(request)
    in_database = VelocityEvaluator(repository).evaluate(request)

    assert in_memory == in_database
    assert in_database.accepted is False
