from decimal import Decimal

import pytest

from src.engine.entrant import entrant_investors, track_entrant
from src.engine.simulator import project
from src.models.parameters import YearEvent
from src.models.results import IRRStatus


@pytest.fixture
def late_raise_events(year0_raise_events):
    events = list(year0_raise_events)
    events[5] = YearEvent(raise_amount=Decimal("20"))
    return events


class TestTrackEntrant:
    def test_year0_entrant_takes_half(self, half_owner_params, year0_raise_events):
        projection = project(half_owner_params, year0_raise_events)
        entrant = track_entrant(projection, 0)
        assert entrant.invested_amount == Decimal("10")
        assert entrant.share_count == 1000
        assert entrant.ownership_at_entry_percent == Decimal("50")

    def test_flat_holding_returns_nothing(self, half_owner_params, year0_raise_events):
        projection = project(half_owner_params, year0_raise_events)
        entrant = track_entrant(projection, 0)
        assert entrant.final_value == Decimal("10")
        assert entrant.irr.status is IRRStatus.CONVERGED
        assert abs(entrant.irr.rate) < Decimal("0.000001")

    def test_path_covers_entry_to_end(self, half_owner_params, year0_raise_events):
        projection = project(half_owner_params, year0_raise_events)
        entrant = track_entrant(projection, 0)
        assert [p.year for p in entrant.path] == list(range(11))
        assert entrant.path[0].percentage_change == Decimal("0")

    def test_diluted_by_later_raise(self, half_owner_params, late_raise_events):
        projection = project(half_owner_params, late_raise_events)
        entrant = track_entrant(projection, 0)
        # 2000 new shares at year 5 on a base of 2000
        assert entrant.final_ownership_percent == Decimal("25")
        assert entrant.path[4].ownership_share_percent == Decimal("50")

    def test_later_entrant_periods(self, half_owner_params, late_raise_events):
        projection = project(half_owner_params, late_raise_events)
        entrant = track_entrant(projection, 5)
        assert entrant.share_count == 2000
        assert entrant.ownership_at_entry_percent == Decimal("50")
        assert len(entrant.path) == 6
        # 50% of 40 = invested 20, five flat years
        assert entrant.final_value == Decimal("20")

    def test_entry_in_final_year_has_undefined_irr(self, half_owner_params):
        events = [YearEvent() for _ in range(3)] + [YearEvent(raise_amount=Decimal("5"))]
        projection = project(half_owner_params, events)
        entrant = track_entrant(projection, 3)
        assert entrant.irr.status is IRRStatus.UNDEFINED

    def test_year_without_raise(self, half_owner_params, year0_raise_events):
        projection = project(half_owner_params, year0_raise_events)
        with pytest.raises(ValueError):
            track_entrant(projection, 3)

    def test_year_outside_projection(self, half_owner_params, year0_raise_events):
        projection = project(half_owner_params, year0_raise_events)
        with pytest.raises(ValueError):
            track_entrant(projection, 42)


class TestEntrantInvestors:
    def test_one_per_raise(self, half_owner_params, late_raise_events):
        projection = project(half_owner_params, late_raise_events)
        entrants = entrant_investors(projection)
        assert [e.entry_year for e in entrants] == [0, 5]

    def test_none_without_raises(self, doubling_params, doubling_events):
        assert entrant_investors(project(doubling_params, doubling_events)) == []

    def test_every_year_in_template(self, canonical_params, canonical_events):
        entrants = entrant_investors(project(canonical_params, canonical_events))
        assert len(entrants) == 11
