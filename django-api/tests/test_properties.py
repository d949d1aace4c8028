"""Property tests for the scheduling core.

Uses hypothesis to check the store's invariants over arbitrary schedules.
"""

from datetime import UTC, datetime, timedelta
from itertools import combinations

from hypothesis import given, settings, strategies as st

from rooms.domain import Event, IntervalStore, Precision

BASE = datetime(2024, 5, 6, tzinfo=UTC)

minutes = st.integers(min_value=0, max_value=7 * 24 * 60)
seconds = st.integers(min_value=0, max_value=24 * 3600)
spans = st.tuples(minutes, st.integers(min_value=1, max_value=240))


def event_at(start_minute: int, length: int) -> Event:
    start = BASE + timedelta(minutes=start_minute)
    event = Event.create("booker", "Meeting", None, start, start + timedelta(minutes=length))
    assert event is not None
    return event


@given(start=seconds, stop=seconds)
@settings(max_examples=200)
def test_create_succeeds_exactly_for_positive_spans(start, stop):
    """Event.create accepts a span iff start < stop after truncation."""
    start_at = BASE + timedelta(seconds=start, microseconds=250)
    stop_at = BASE + timedelta(seconds=stop, microseconds=750)
    event = Event.create("booker", "Meeting", None, start_at, stop_at, precision=Precision.SECOND)
    if start < stop:
        assert event is not None
        assert event.start < event.stop
    else:
        assert event is None


@given(candidates=st.lists(spans, max_size=30))
@settings(max_examples=100)
def test_stored_events_never_overlap(candidates):
    """Whatever gets accepted is pairwise separated, touching at most."""
    store = IntervalStore()
    for start_minute, length in candidates:
        store.insert(event_at(start_minute, length))

    stored = list(store)
    for first, second in combinations(stored, 2):
        assert first.stop <= second.start or second.stop <= first.start
        assert not first.overlaps(second) and not second.overlaps(first)
    assert stored == sorted(stored)


@given(candidates=st.lists(spans, max_size=20), window=st.tuples(minutes, minutes))
@settings(max_examples=100)
def test_range_query_is_idempotent(candidates, window):
    store = IntervalStore()
    for start_minute, length in candidates:
        store.insert(event_at(start_minute, length))
    before = list(store)
    start, stop = BASE + timedelta(minutes=min(window)), BASE + timedelta(minutes=max(window))

    result = store.range_query(start, stop)

    assert result == store.range_query(start, stop)
    assert list(store) == before
    assert all(start <= event.start and event.stop <= stop for event in result)


@given(
    candidates=st.lists(spans, max_size=20),
    new=spans,
    offset=st.floats(min_value=0.01, max_value=0.99),
)
@settings(max_examples=100)
def test_insert_then_remove_restores_store(candidates, new, offset):
    """Removing by an instant inside a fresh event undoes its insertion."""
    store = IntervalStore()
    for start_minute, length in candidates:
        store.insert(event_at(start_minute, length))
    before = list(store)
    event = event_at(*new)

    if store.insert(event):
        inside = event.start + (event.stop - event.start) * offset
        assert store.remove_by_instant(inside) == event
    assert list(store) == before
