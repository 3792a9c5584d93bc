import logging
from dataclasses import dataclass
from typing import List, Optional

from discomix.application.library import PlaylistLibrary
from discomix.application.pipeline import GenerationResult, PlaylistGenerator
from discomix.domain import catalog
from discomix.domain.entities import Artist, Country, Playlist, SavedPlaylist
from discomix.domain.errors import CountryNotFound
from discomix.domain.markets import spotify_market
from discomix.domain.ports import ArtistDiscovery

logger = logging.getLogger(__name__)


@dataclass
class ExploreResult:
    """Outcome of generating a playlist for a country and genre."""

    saved: SavedPlaylist
    generation: GenerationResult
    artists: List[Artist]


class ExploreService:
    """Country → genre → artists → playlist flow shared by the CLI and HTTP front ends."""

    def __init__(self,
                 discovery: ArtistDiscovery,
                 generator: PlaylistGenerator,
                 library: PlaylistLibrary,
                 artist_limit: int = 10):
        self.discovery = discovery
        self.generator = generator
        self.library = library
        self.artist_limit = artist_limit

    def countries(self) -> List[Country]:
        return catalog.all_countries()

    def country(self, name: str) -> Country:
        country = catalog.find_country(name)
        if country is None:
            raise CountryNotFound(f"Unknown country: {name}")
        return country

    def discover_artists(self, country_name: str, genre: str, limit: Optional[int] = None) -> List[Artist]:
        if limit is None:
            limit = self.artist_limit
        if limit <= 0:
            raise ValueError(f"Artist limit must be positive, got {limit}")
        return self.discovery.search_artists(country_name, genre, limit)

    def generate_for_country(self, country_name: str, genre: str,
                             tracks_per_artist: Optional[int] = None,
                             artist_limit: Optional[int] = None) -> ExploreResult:
        """Discover artists, build the playlist and remember it locally.

        Raises:
            CountryNotFound: country is not in the catalog
            ArtistDiscoveryError, NoTracksFound, NoAccessToken, BadResponse: from the steps
        """
        country = self.country(country_name)
        artists = self.discover_artists(country.name, genre, artist_limit)
        logger.info(f"Discovered {len(artists)} artists for {country.name} / {genre}")

        generation = self.generator.generate(
            country.name,
            genre,
            artists,
            market=spotify_market(country.name),
            tracks_per_artist=tracks_per_artist,
        )
        saved = self.library.save(generation.playlist, country, genre)
        return ExploreResult(saved=saved, generation=generation, artists=artists)

    def open_saved(self, saved_id: str) -> Optional[Playlist]:
        """Re-fetch a saved playlist from Spotify. None when the local id is unknown."""
        saved = self.library.get(saved_id)
        if saved is None:
            return None
        return self.generator.music.fetch_playlist(
            saved.spotify_playlist_id, market=spotify_market(saved.country_name)
        )
