from dataclasses import dataclass
from typing import Optional

from discomix.application.explore import ExploreService
from discomix.application.library import PlaylistLibrary
from discomix.application.pipeline import PlaylistGenerator
from discomix.crosscutting.config import SecretManager, get_secret_manager
from discomix.infrastructure.auth import SpotifyAuthManager
from discomix.infrastructure.player import SpotifyPlayer
from discomix.infrastructure.providers.musicbrainz import MusicBrainzProvider
from discomix.infrastructure.providers.spotify import SpotifyProvider
from discomix.infrastructure.storage import JsonKeyValueStore


@dataclass
class Services:
    """Everything the front ends need, wired once per process."""

    secrets: SecretManager
    auth: SpotifyAuthManager
    spotify: SpotifyProvider
    player: SpotifyPlayer
    library: PlaylistLibrary
    explore: ExploreService


def build_services(secret_manager: Optional[SecretManager] = None) -> Services:
    secrets = secret_manager or get_secret_manager()

    auth = SpotifyAuthManager(secrets)
    spotify = SpotifyProvider(auth)
    library = PlaylistLibrary(JsonKeyValueStore(str(secrets.library_file)))
    discovery = MusicBrainzProvider(
        user_agent=secrets.get_musicbrainz_user_agent(),
        include_url_rels=secrets.get('DISCOMIX_MUSICBRAINZ_URL_RELS', '0') == '1',
    )
    generator = PlaylistGenerator(spotify, tracks_per_artist=secrets.get_tracks_per_artist())
    explore = ExploreService(discovery, generator, library, artist_limit=secrets.get_artist_limit())

    return Services(
        secrets=secrets,
        auth=auth,
        spotify=spotify,
        player=SpotifyPlayer(auth, spotify),
        library=library,
        explore=explore,
    )
