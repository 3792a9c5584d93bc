import logging
import re
from typing import Any, Dict, List, Optional

import requests

from discomix.domain.entities import Artist
from discomix.domain.errors import ArtistDiscoveryError
from discomix.domain.markets import musicbrainz_country_code
from discomix.domain.ports import ArtistDiscovery

logger = logging.getLogger(__name__)

MUSICBRAINZ_ARTIST_URL = 'https://musicbrainz.org/ws/2/artist'

_SPOTIFY_ARTIST_URL = re.compile(r'open\.spotify\.com/artist/([A-Za-z0-9]+)')


class MusicBrainzProvider(ArtistDiscovery):
    """Artist discovery backed by the MusicBrainz web service."""

    def __init__(self,
                 user_agent: str,
                 session: Optional[requests.Session] = None,
                 timeout: float = 15.0,
                 include_url_rels: bool = False):
        """Initialize MusicBrainz provider.

        Args:
            user_agent: Descriptive User-Agent; MusicBrainz rejects anonymous clients
            session: Optional requests session (tests pass a mock)
            timeout: Per-request timeout in seconds
            include_url_rels: Ask for URL relations so Spotify ids can be picked up
        """
        self._session = session or requests.Session()
        self._session.headers.update({'User-Agent': user_agent, 'Accept': 'application/json'})
        self._timeout = timeout
        self._include_url_rels = include_url_rels

    def build_query(self, country: str, genre: str, limit: int = 10) -> Dict[str, str]:
        country_code = musicbrainz_country_code(country)
        params = {
            'query': f'country:{country_code} AND tag:{genre}',
            'fmt': 'json',
            'limit': str(limit),
        }
        if self._include_url_rels:
            params['inc'] = 'url-rels'
        return params

    def search_artists(self, country: str, genre: str, limit: int = 10) -> List[Artist]:
        """Search artists from a country tagged with a genre.

        Args:
            country: Country name as shown in the catalog
            genre: Genre tag
            limit: Maximum number of artists

        Returns:
            Artists in MusicBrainz relevance order

        Raises:
            ArtistDiscoveryError: on network, status or decode failure
        """
        params = self.build_query(country, genre, limit)
        logger.debug(f"MusicBrainz query: {params['query']} (limit={limit})")

        try:
            response = self._session.get(MUSICBRAINZ_ARTIST_URL, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise ArtistDiscoveryError(f"Failed to load artists: {e}")

        if not 200 <= response.status_code < 300:
            raise ArtistDiscoveryError(
                f"Failed to load artists: HTTP {response.status_code}"
            )

        try:
            payload = response.json()
            artists = [self._to_artist(item) for item in payload['artists']]
        except (ValueError, KeyError, TypeError) as e:
            raise ArtistDiscoveryError(f"Failed to load artists: {e}")

        logger.info(f"MusicBrainz returned {len(artists)} artists for {country} / {genre}")
        return artists

    def _to_artist(self, item: Dict[str, Any]) -> Artist:
        return Artist(
            id=item['id'],
            name=item['name'],
            spotify_id=self._spotify_id_from_relations(item.get('relations') or []),
            type=item.get('type'),
            country=item.get('country'),
            disambiguation=item.get('disambiguation'),
        )

    @staticmethod
    def _spotify_id_from_relations(relations: List[Dict[str, Any]]) -> Optional[str]:
        for relation in relations:
            resource = (relation.get('url') or {}).get('resource', '')
            match = _SPOTIFY_ARTIST_URL.search(resource)
            if match:
                return match.group(1)
        return None
