import pytest

from discomix.domain import catalog
from discomix.domain.markets import (
    DEFAULT_CODE, MUSICBRAINZ_COUNTRY_CODES, SPOTIFY_MARKETS,
    musicbrainz_country_code, spotify_market,
)


class TestCatalog:
    """Tests for the static country catalog."""

    def test_twenty_countries_with_unique_ids(self):
        countries = catalog.all_countries()
        assert len(countries) == 20
        assert len({c.id for c in countries}) == 20

    def test_every_country_has_genres(self):
        for country in catalog.all_countries():
            assert len(country.genres) == 3, country.name

    def test_all_countries_returns_copy(self):
        countries = catalog.all_countries()
        countries.clear()
        assert len(catalog.all_countries()) == 20

    def test_find_country_exact_match(self):
        japan = catalog.find_country('Japan')
        assert japan.id == 'jp'
        assert japan.genres == ('J-Pop', 'Enka', 'City Pop')

    def test_find_country_is_case_sensitive(self):
        assert catalog.find_country('japan') is None
        assert catalog.find_country('Atlantis') is None

    def test_find_country_by_id(self):
        assert catalog.find_country_by_id('br').name == 'Brazil'
        assert catalog.find_country_by_id('xx') is None

    def test_all_genres_sorted_and_unique(self):
        genres = catalog.all_genres()
        assert genres == sorted(set(genres))
        assert 'Folk' in genres
        assert genres.count('Folk') == 1


class TestMarkets:
    """Tests for MusicBrainz and Spotify country code tables."""

    @pytest.mark.parametrize('name,code', [
        ('Japan', 'JP'), ('United Kingdom', 'GB'), ('South Korea', 'KR'), ('China', 'CN'),
    ])
    def test_musicbrainz_codes(self, name, code):
        assert musicbrainz_country_code(name) == code

    def test_every_catalog_country_has_a_musicbrainz_code(self):
        for country in catalog.all_countries():
            assert country.name in MUSICBRAINZ_COUNTRY_CODES

    def test_unknown_country_defaults_to_us(self):
        assert musicbrainz_country_code('Atlantis') == DEFAULT_CODE == 'US'
        assert spotify_market('Atlantis') == 'US'

    def test_spotify_market_for_catalog_country(self):
        assert spotify_market('Brazil') == 'BR'

    def test_china_is_not_a_spotify_market(self):
        assert 'China' not in SPOTIFY_MARKETS
        assert spotify_market('China') == 'US'
        assert musicbrainz_country_code('China') == 'CN'
