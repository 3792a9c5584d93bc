from __future__ import annotations

from typing import List, Optional, Protocol

from .entities import Artist, Playlist, Track


class ArtistDiscovery(Protocol):
    """Port for services that find artists by country and genre tag."""

    def search_artists(self, country: str, genre: str, limit: int = 10) -> List[Artist]:
        """Return artists tagged with genre from the named country."""


class MusicService(Protocol):
    """Port defining the streaming-service calls the playlist pipeline relies on.

    Implementations raise the typed failures from ``discomix.domain.errors`` and
    map provider payloads into domain entities.
    """

    def current_user_id(self) -> str:
        """Return the id of the signed-in user."""

    def search_artist(self, name: str, market: Optional[str] = None,
                      genre_hint: Optional[str] = None) -> Optional[str]:
        """Return the first matching artist id, or None."""

    def artist_top_tracks(self, artist_id: str, market: str) -> List[Track]:
        """Return the artist's ranked top tracks for a market."""

    def create_playlist(self, user_id: str, name: str, description: Optional[str] = None,
                        public: bool = False) -> Playlist:
        """Create an empty playlist owned by user_id."""

    def add_tracks(self, playlist_id: str, track_uris: List[str]) -> str:
        """Append track URIs in one call and return the snapshot id."""

    def fetch_playlist(self, playlist_id: str, market: Optional[str] = None) -> Playlist:
        """Return the playlist with its track items."""
