import logging
from typing import Any, Callable, List, Optional, TypeVar

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from discomix.domain.entities import Artist, Playlist, Track
from discomix.domain.errors import BadResponse, DecodeFailure, InvalidURL, NoAccessToken
from discomix.domain.ports import MusicService

logger = logging.getLogger(__name__)

T = TypeVar('T')

PLAYLIST_FIELDS = 'id,name,description,uri,images,tracks.items(track(id,name,uri,artists,album,duration_ms))'


class SpotifyProvider(MusicService):
    """Spotify Web API client used by the playlist pipeline."""

    def __init__(self, auth, requests_timeout: int = 15):
        """Initialize Spotify provider.

        Args:
            auth: Object exposing ``access_token`` (see SpotifyAuthManager);
                read on every request so logins and logouts take effect at once
            requests_timeout: Per-request timeout in seconds
        """
        self._auth = auth
        self._requests_timeout = requests_timeout
        self._client = None
        self._client_token: Optional[str] = None

    def _spotify(self) -> spotipy.Spotify:
        token = self._auth.access_token
        if not token:
            raise NoAccessToken("Spotify access token is missing; log in first")
        if self._client is None or token != self._client_token:
            self._client = spotipy.Spotify(auth=token, requests_timeout=self._requests_timeout)
            self._client_token = token
        return self._client

    def request(self, operation: str, method: str, *args: Any, **kwargs: Any) -> Any:
        """Run one authenticated Web API call and translate its failures.

        Raises:
            NoAccessToken: no token is stored
            BadResponse: non-2xx status (status, body) or transport failure (-1)
        """
        client = self._spotify()
        try:
            return getattr(client, method)(*args, **kwargs)
        except SpotifyException as e:
            logger.error(f"Spotify API error {e.http_status} during {operation}: {e.msg}")
            raise BadResponse(e.http_status, e.msg)
        except requests.RequestException as e:
            logger.error(f"Spotify request failed during {operation}: {e}")
            raise BadResponse(-1, f"Non-HTTP response from Spotify: {e}")

    @staticmethod
    def _path_id(kind: str, value: str) -> str:
        if not value or '/' in value:
            raise InvalidURL(f"Cannot build a Spotify URL from {kind} id {value!r}")
        return value

    def _decode(self, operation: str, parse: Callable[[], T]) -> T:
        try:
            return parse()
        except (KeyError, TypeError, IndexError) as e:
            raise DecodeFailure(f"Unexpected Spotify payload for {operation}: {e}")

    def current_user_id(self) -> str:
        """GET /v1/me"""
        profile = self.request('current user', 'current_user')
        return self._decode('current user', lambda: profile['id'])

    def search_artist(self, name: str, market: Optional[str] = None,
                      genre_hint: Optional[str] = None) -> Optional[str]:
        """Search an artist by name, optionally biased by market and genre.

        Returns:
            Id of the first hit, or None when nothing matches
        """
        query = name
        if genre_hint:
            query += f' genre:"{genre_hint}"'

        results = self.request('artist search', 'search', q=query, limit=5, type='artist', market=market)
        items = self._decode('artist search', lambda: results['artists']['items'])
        if not items:
            logger.debug(f"No Spotify artist found for query {query!r}")
            return None
        return self._decode('artist search', lambda: items[0]['id'])

    def artist_top_tracks(self, artist_id: str, market: str) -> List[Track]:
        """GET /v1/artists/{id}/top-tracks"""
        response = self.request('top tracks', 'artist_top_tracks', self._path_id('artist', artist_id), country=market)
        return self._decode('top tracks', lambda: [Track.from_spotify(t) for t in response['tracks']])

    def create_playlist(self, user_id: str, name: str, description: Optional[str] = None,
                        public: bool = False) -> Playlist:
        """POST /v1/users/{user_id}/playlists"""
        logger.info(f"Creating playlist '{name}' for user {user_id}")
        result = self.request(
            'create playlist', 'user_playlist_create',
            user_id, name, public=public, description=description or ''
        )
        return self._decode('create playlist', lambda: Playlist.from_spotify(result))

    def add_tracks(self, playlist_id: str, track_uris: List[str]) -> str:
        """POST /v1/playlists/{id}/tracks with every URI in one call."""
        result = self.request('add tracks', 'playlist_add_items', self._path_id('playlist', playlist_id), track_uris)
        return self._decode('add tracks', lambda: result['snapshot_id'])

    def fetch_playlist(self, playlist_id: str, market: Optional[str] = None) -> Playlist:
        """GET /v1/playlists/{id} limited to the fields the app displays."""
        result = self.request('fetch playlist', 'playlist', self._path_id('playlist', playlist_id), fields=PLAYLIST_FIELDS, market=market)
        return self._decode('fetch playlist', lambda: Playlist.from_spotify(result))

    def artist_image_url(self, artist: Artist) -> Optional[str]:
        """Largest image URL for an artist, resolving its Spotify id by name if needed."""
        spotify_id = artist.spotify_id or self.search_artist(artist.name)
        if not spotify_id:
            logger.info(f"No Spotify id found for artist: {artist.name}")
            return None

        details = self.request('artist details', 'artist', self._path_id('artist', spotify_id))
        images = self._decode('artist details', lambda: details['images'])
        if not images:
            return None
        # Spotify lists the largest image first
        return images[0].get('url')
