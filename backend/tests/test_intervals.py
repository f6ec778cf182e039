from datetime import datetime

import pytest

from agenda.services.slots.intervals import Interval, first_overlap, overlaps


def at(hour, minute=0):
    return datetime(2024, 6, 5, hour, minute)


def test_touching_intervals_do_not_overlap():
    first = Interval(at(9), at(10))
    second = Interval(at(10), at(11))

    assert not overlaps(first, second)
    assert not overlaps(second, first)


def test_partial_overlap_is_symmetric():
    a = Interval(at(9), at(10))
    b = Interval(at(9, 30), at(10, 30))

    assert overlaps(a, b)
    assert overlaps(b, a)
    assert a.overlaps(b)


def test_contained_interval_overlaps():
    outer = Interval(at(9), at(10))
    inner = Interval(at(9, 15), at(9, 45))

    assert overlaps(outer, inner)
    assert outer.contains(inner)
    assert not inner.contains(outer)


def test_empty_or_inverted_interval_rejected():
    with pytest.raises(ValueError):
        Interval(at(10), at(10))
    with pytest.raises(ValueError):
        Interval(at(11), at(10))


def test_open_ended_interval_blocks_everything_after_start():
    absence = Interval.open_ended(at(12))

    assert absence.is_open_ended
    assert overlaps(absence, Interval(datetime(2031, 1, 1, 9), datetime(2031, 1, 1, 10)))
    assert not overlaps(absence, Interval(at(11), at(12)))


def test_of_duration():
    assert Interval.of_duration(at(9), 45) == Interval(at(9), at(9, 45))


def test_first_overlap():
    blockers = [Interval(at(9), at(10)), Interval(at(12), at(14))]

    assert first_overlap(Interval(at(13), at(15)), blockers) == blockers[1]
    assert first_overlap(Interval(at(10), at(12)), blockers) is None
