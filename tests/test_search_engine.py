"""Tests for autocomplete, search and suggestions."""
import pytest
from sl_locations.core.exceptions import RateLimitError, UnsafeInputError, ValidationError
from sl_locations.core.models import LocationType, SearchOptions
from sl_locations.core.search_engine import SearchEngine, build_full_path
from sl_locations.core.search_index import SearchIndex
from sl_locations.core.service import LocationService


def test_search_exact_word(magbass_service):
    """A word of a town name finds the town with a full score."""
    results = magbass_service.search("MAGBASS", client_id="clientA")

    assert len(results) == 1
    assert results[0].name == "MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)"
    assert results[0].type == LocationType.TOWN
    assert results[0].score == 1.0
    assert results[0].full_path == "NORTHERN > TONKOLILI > KHOLIFA MAMUNTHA/MAYOSSO > MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)"


def test_autocomplete_word_prefix(magbass_service):
    """A prefix of a word completes to the containing name."""
    assert magbass_service.autocomplete("MAG", client_id="clientA") == ["MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)"]


def test_autocomplete_rate_limit(magbass_service):
    """The 51st autocomplete call in a window is rejected."""
    for _ in range(50):
        magbass_service.autocomplete("MAG", client_id="clientA")

    with pytest.raises(RateLimitError):
        magbass_service.autocomplete("MAG", client_id="clientA")

    assert magbass_service.autocomplete("MAG", client_id="clientB")


def test_autocomplete_rate_limit_recovers(magbass_service, fake_clock):
    """Test that the budget returns after the window."""
    for _ in range(50):
        magbass_service.autocomplete("MAG", client_id="clientA")
    fake_clock.advance(60000)

    assert magbass_service.autocomplete("MAG", client_id="clientA")


def test_autocomplete(engine):
    """Every name containing the query is offered."""
    names = engine.autocomplete("kholifa")

    assert set(names) == {
        "KHOLIFA MAMUNTHA/MAYOSSO",
        "KHOLIFA ROWALLA",
        "MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)",
    }


def test_autocomplete_orders_by_score(engine):
    """An exact name outranks names that merely contain it."""
    names = engine.autocomplete("Moyamba")

    assert names[0] == "MOYAMBA"
    assert "MOYAMBA JUNCTION" in names
    assert "MOYAMBA DISTRICT COUNCIL" in names
    assert len(names) == len(set(names))


def test_autocomplete_limit(engine):
    assert len(engine.autocomplete("ma", limit=2)) == 2


def test_autocomplete_short_query(engine):
    """Test ValidationError for queries shorter than two characters."""
    with pytest.raises(ValidationError):
        engine.autocomplete("m")
    with pytest.raises(ValidationError):
        engine.autocomplete("")


def test_search_ranking(engine):
    """Exact name first with score 1.0, then lower scored partial matches."""
    results = engine.search("Kholifa Rowalla")

    top = results[0]
    assert top.name == "KHOLIFA ROWALLA"
    assert top.type == LocationType.CHIEFDOM
    assert top.score == 1.0
    assert top.full_path == "NORTHERN > TONKOLILI > KHOLIFA ROWALLA"
    assert top.code == "SL-CHIEFDOM-KHOLIFAROWALLA"

    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)
    assert all(score >= 0.3 for score in scores)
    assert len({(r.name, r.type) for r in results}) == len(results)


def test_search_type_filter(engine):
    """Test restricting results to one level."""
    results = engine.search("Tonkolili", SearchOptions(types=("council",)))

    assert results
    assert all(r.type == LocationType.COUNCIL for r in results)
    assert results[0].name == "TONKOLILI DISTRICT COUNCIL"


def test_search_phonetic_fallback(engine):
    """A misspelling is found through the phonetic key with a reduced score."""
    results = engine.search("Magburka")

    assert {(r.name, r.type) for r in results} == {
        ("MAGBURAKA", LocationType.SECTION),
        ("MAGBURAKA", LocationType.TOWN),
    }
    assert all(r.score == pytest.approx((1 - 1 / 9) * 0.8) for r in results)

    assert engine.search("Magburka", SearchOptions(fuzzy=False)) == []


def test_search_limit(engine):
    assert len(engine.search("kholifa", SearchOptions(limit=1))) == 1
    assert engine.search("kholifa", SearchOptions(limit=0)) == []


def test_search_blank_query(engine):
    """Test that an empty query gives no results rather than an error."""
    assert engine.search("") == []
    assert engine.search("   ") == []


def test_search_rejected_input(engine):
    """Test sanitizer rejections."""
    with pytest.raises(UnsafeInputError):
        engine.search("'; DROP TABLE towns")
    with pytest.raises(ValidationError):
        engine.search("a" * 101)


def test_search_unknown_type():
    with pytest.raises(ValidationError):
        SearchOptions(types=("county",))


def test_search_uses_cache(engine):
    """Test that a repeated query is served from the cache."""
    first = engine.search("Makeni")
    hits = engine.cache.hits
    second = engine.search("makeni")

    assert first == second
    assert engine.cache.hits == hits + 1


def test_search_rate_limit(fake_clock, sample_records):
    """Search has its own budget, separate from autocomplete."""
    service = LocationService.from_records(sample_records, search_limit=2, clock=fake_clock)
    service.search("Makeni", client_id="c")
    service.search("Makeni", client_id="c")

    with pytest.raises(RateLimitError):
        service.search("Makeni", client_id="c")
    assert service.autocomplete("Makeni", client_id="c")


def test_every_name_round_trips(fake_clock, sample_rows):
    """Every source name is found exactly by search and offered by autocomplete."""
    service = LocationService.from_records(
        sample_rows, search_limit=1000, autocomplete_limit=1000, clock=fake_clock
    )
    names = {name for row in sample_rows for name in row if name}

    for name in names:
        results = service.search(name)
        assert any(r.name == name and r.score == 1.0 for r in results), name
        assert name in service.autocomplete(name), name


def test_get_suggestions(engine):
    """Test prefix suggestions."""
    assert engine.get_suggestions("kho") == [
        "KHOLIFA MAMUNTHA/MAYOSSO",
        "KHOLIFA ROWALLA",
        "MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)",
    ]
    assert engine.get_suggestions("kho", LocationType.CHIEFDOM) == [
        "KHOLIFA MAMUNTHA/MAYOSSO",
        "KHOLIFA ROWALLA",
    ]
    assert engine.get_suggestions("kho", "chiefdom", limit=1) == ["KHOLIFA MAMUNTHA/MAYOSSO"]


def test_get_suggestions_short_input(engine):
    assert engine.get_suggestions("") == []
    assert engine.get_suggestions("k") == []
    assert engine.get_suggestions(" k ") == []


def test_closest_names(engine):
    """Test similarity-ranked names of one level."""
    assert engine.closest_names("Tonkolily", LocationType.DISTRICT)[0] == "TONKOLILI"
    assert engine.closest_names("", LocationType.DISTRICT) == []


def test_empty_index():
    """Queries over an empty index return nothing."""
    engine = SearchEngine(SearchIndex())

    assert engine.search("Makeni") == []
    assert engine.autocomplete("Makeni") == []
    assert engine.get_suggestions("Makeni") == []
    assert engine.closest_names("Makeni", "town") == []


def test_build_full_path(engine):
    """Repeated names are not repeated in the path."""
    section = next(
        e for e in engine.index.get("makeni") if e.type == LocationType.SECTION
    )
    assert build_full_path(section) == "NORTHERN > BOMBALI > BOMBALI SEBORA > MAKENI"

    region = engine.index.get("southern")[0]
    assert build_full_path(region) == "SOUTHERN"


def test_clear_rate_limits(magbass_service):
    for _ in range(50):
        magbass_service.autocomplete("MAG", client_id="clientA")
    magbass_service.clear_rate_limits()

    assert magbass_service.autocomplete("MAG", client_id="clientA")


def test_get_suggestions_short_after_normalizing(engine):
    """Input that normalizes to one character gives no suggestions."""
    assert engine.get_suggestions("m.") == []
    assert engine.get_suggestions("m !") == []


def test_prefix_names(engine):
    """Test the unsanitized prefix lookup on normalized text."""
    assert engine.prefix_names("kho", LocationType.CHIEFDOM) == [
        "KHOLIFA MAMUNTHA/MAYOSSO",
        "KHOLIFA ROWALLA",
    ]
    assert engine.prefix_names("union") == []
    assert engine.prefix_names("m") == []


def test_non_string_queries(engine):
    """Non-string input is rejected by the sanitizer."""
    with pytest.raises(ValidationError) as exc_info:
        engine.search(5)
    assert exc_info.value.message == "Search query must be a string"

    with pytest.raises(ValidationError):
        engine.get_suggestions(5)
    with pytest.raises(ValidationError):
        engine.autocomplete(5)

    assert engine.search(None) == []
    assert engine.get_suggestions(None) == []
