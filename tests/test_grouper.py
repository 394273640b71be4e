from awardbot.rank.grouper import category_of, filter_awards, group_awards
from awardbot.types import FlightAward


def award(origin="JFK", airline="GOL", dep="08:00", econ=None, bus=None):
    return FlightAward(airline=airline, origin_code=origin, dest_code="GRU",
                       departure_time=dep, arrival_time="20:00",
                       economy_points=econ, business_points=bus)


def test_ceiling_keeps_award_when_either_cabin_fits():
    a = award(econ=35000, bus=90000)
    b = award(bus=45000)
    c = award(econ=50000)
    kept = filter_awards([a, b, c], 40000)
    assert kept == [a]
    assert filter_awards([a, b, c], None) == [a, b, c]
    for x in kept:
        assert min(x.economy_points or float("inf"), x.business_points or float("inf")) <= 40000


def test_categories_are_exhaustive_disjoint_and_ordered():
    awards = [award(bus=80000), award(econ=20000), award(econ=25000, bus=70000)]
    groups = group_awards(awards)
    assert [g.category for g in groups] == ["both", "economy_only", "business_only"]
    assert [g.label for g in groups] == ["Both Economy & Business", "Economy only", "Business only"]
    placed = [a for g in groups for a in g.awards]
    assert len(placed) == len(awards) and all(a in placed for a in awards)
    for g in groups:
        assert all(category_of(a) == g.category for a in g.awards)


def test_empty_categories_are_omitted():
    groups = group_awards([award(econ=1000), award(econ=2000)])
    assert [g.category for g in groups] == ["economy_only"]
    assert group_awards([], 1000) == []
    assert group_awards([award(econ=5000)], 1000) == []


def test_sub_groups_first_seen_after_departure_sort():
    awards = [
        award(origin="LGA", airline="AA", dep="14:00", econ=1),
        award(origin="JFK", airline="GOL", dep="09:15", econ=2),
        award(origin="LGA", airline="AA", dep="07:05", econ=3),
        award(origin="JFK", airline="AA", dep="22:40", econ=4),
    ]
    [group] = group_awards(awards)
    keys = [(c.origin_code, c.airline) for c in group.carrier_groups]
    assert keys == [("LGA", "AA"), ("JFK", "GOL"), ("JFK", "AA")]
    assert [a.departure_time for a in group.carrier_groups[0].awards] == ["07:05", "14:00"]


def test_departure_sort_is_lexical_and_stable():
    late = award(dep="23:50", econ=1)
    early = award(dep="00:10", econ=2)
    unknown = award(dep="", econ=3)
    tie_a = award(dep="09:00", econ=4)
    tie_b = award(dep="09:00", econ=5)
    [group] = group_awards([late, tie_a, early, unknown, tie_b])
    assert [a.economy_points for a in group.awards] == [3, 2, 4, 5, 1]
