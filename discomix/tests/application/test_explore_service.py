import os
import shutil
import tempfile
from unittest.mock import Mock

import pytest

from discomix.application.explore import ExploreService
from discomix.application.library import PlaylistLibrary
from discomix.application.pipeline import GenerationResult
from discomix.domain.entities import Artist, Playlist, Track
from discomix.domain.errors import ArtistDiscoveryError, CountryNotFound
from discomix.infrastructure.storage import JsonKeyValueStore


class TestExploreService:
    """Tests for the country to playlist flow."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.library = PlaylistLibrary(JsonKeyValueStore(os.path.join(self.temp_dir, 'library.json')))
        self.discovery = Mock()
        self.discovery.search_artists.return_value = [Artist(id='mb1', name='Sepultura')]
        self.generator = Mock()
        self.playlist = Playlist(
            id='sp1', name='Brazil Rock Mix', uri='spotify:playlist:sp1',
            tracks=[Track(uri='spotify:track:1')],
        )
        self.generator.generate.return_value = GenerationResult(
            playlist=self.playlist, track_uris=['spotify:track:1'], summary={'resolved_artists': 1},
        )
        self.service = ExploreService(self.discovery, self.generator, self.library, artist_limit=7)

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_countries(self):
        assert len(self.service.countries()) == 20

    def test_unknown_country(self):
        with pytest.raises(CountryNotFound):
            self.service.country('Atlantis')

    def test_discover_artists_uses_default_limit(self):
        self.service.discover_artists('Brazil', 'Rock')
        self.discovery.search_artists.assert_called_once_with('Brazil', 'Rock', 7)

    def test_discover_artists_with_limit(self):
        self.service.discover_artists('Brazil', 'Rock', 3)
        self.discovery.search_artists.assert_called_once_with('Brazil', 'Rock', 3)

    def test_discover_artists_rejects_zero_limit(self):
        with pytest.raises(ValueError, match='limit'):
            self.service.discover_artists('Brazil', 'Rock', 0)
        self.discovery.search_artists.assert_not_called()

    def test_generate_for_country_saves_result(self):
        result = self.service.generate_for_country('Brazil', 'Rock', tracks_per_artist=3)

        self.generator.generate.assert_called_once_with(
            'Brazil', 'Rock', [Artist(id='mb1', name='Sepultura')], market='BR', tracks_per_artist=3,
        )
        assert result.saved.spotify_playlist_id == 'sp1'
        assert result.saved.track_count == 1
        assert self.library.get(result.saved.id) is result.saved

    def test_generate_for_country_without_spotify_market(self):
        self.service.generate_for_country('China', 'Folk')
        assert self.generator.generate.call_args.kwargs['market'] == 'US'

    def test_generate_for_unknown_country_does_nothing(self):
        with pytest.raises(CountryNotFound):
            self.service.generate_for_country('Atlantis', 'Rock')
        self.discovery.search_artists.assert_not_called()
        self.generator.generate.assert_not_called()

    def test_discovery_failure_is_not_saved(self):
        self.discovery.search_artists.side_effect = ArtistDiscoveryError('Failed to load artists: HTTP 503')

        with pytest.raises(ArtistDiscoveryError):
            self.service.generate_for_country('Brazil', 'Rock')
        assert self.library.total_count == 0

    def test_open_saved(self):
        saved = self.service.generate_for_country('Brazil', 'Rock').saved
        self.generator.music.fetch_playlist.return_value = self.playlist

        assert self.service.open_saved(saved.id) is self.playlist
        self.generator.music.fetch_playlist.assert_called_once_with('sp1', market='BR')

    def test_open_saved_unknown(self):
        assert self.service.open_saved('missing') is None
