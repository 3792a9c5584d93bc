import logging
import time
from typing import Any, Callable, Dict, List, Optional

from discomix.domain.entities import PlaybackState
from discomix.domain.errors import BadResponse, InvalidURL, NotAuthenticated, PlayerUnavailable
from discomix.infrastructure.providers.spotify import SpotifyProvider

logger = logging.getLogger(__name__)


class SpotifyPlayer:
    """Playback control for the user's Spotify devices (Spotify Connect)."""

    def __init__(self,
                 auth,
                 spotify: SpotifyProvider,
                 max_connection_attempts: int = 3,
                 retry_delay_sec: float = 2.0,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize player.

        Args:
            auth: Auth manager exposing ``is_authenticated``
            spotify: Provider whose request helper performs the calls
            max_connection_attempts: Device lookups before giving up
            retry_delay_sec: Fixed wait between lookups
            sleep: Injected for tests
        """
        self._auth = auth
        self._spotify = spotify
        self.max_connection_attempts = max_connection_attempts
        self.retry_delay_sec = retry_delay_sec
        self._sleep = sleep
        self.device_id: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.device_id is not None

    @staticmethod
    def _pick_device(devices: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        usable = [d for d in devices if d.get('id') and not d.get('is_restricted')]
        for device in usable:
            if device.get('is_active'):
                return device
        return usable[0] if usable else None

    def connect(self) -> str:
        """Find a device to control, retrying a fixed number of times.

        Returns:
            The selected device id

        Raises:
            NotAuthenticated: no Spotify login
            PlayerUnavailable: no device after all attempts
        """
        if not self._auth.is_authenticated:
            raise NotAuthenticated("Not authenticated with Spotify")

        if self.device_id:
            return self.device_id

        last_error = "no Spotify device is available; open Spotify on a device first"
        for attempt in range(1, self.max_connection_attempts + 1):
            logger.info(f"Attempting to connect to Spotify (attempt {attempt}/{self.max_connection_attempts})...")
            try:
                response = self._spotify.request('list devices', 'devices')
                device = self._pick_device((response or {}).get('devices') or [])
            except BadResponse as e:
                last_error = str(e)
                device = None

            if device:
                self.device_id = device['id']
                logger.info(f"Connected to Spotify device {device.get('name', self.device_id)}")
                return self.device_id

            if attempt < self.max_connection_attempts:
                self._sleep(self.retry_delay_sec)

        raise PlayerUnavailable(f"Failed to connect to Spotify: {last_error}")

    def disconnect(self) -> None:
        self.device_id = None

    def _control(self, action: str, method: str, *args: Any, **kwargs: Any) -> Any:
        """Send a command to the connected device, reconnecting once if it vanished."""
        device_id = self.connect()
        try:
            return self._spotify.request(action, method, *args, device_id=device_id, **kwargs)
        except BadResponse as e:
            if e.status != 404:
                raise
            logger.warning(f"Spotify device {device_id} is no longer available, reconnecting: {e}")
            self.device_id = None

        device_id = self.connect()
        return self._spotify.request(action, method, *args, device_id=device_id, **kwargs)

    def play(self) -> None:
        self._control('play', 'start_playback')

    def play_playlist(self, playlist_uri: str) -> None:
        if not playlist_uri.startswith('spotify:'):
            raise InvalidURL(f"Not a Spotify URI: {playlist_uri!r}")
        self._control('play playlist', 'start_playback', context_uri=playlist_uri)

    def pause(self) -> None:
        self._control('pause', 'pause_playback')

    def skip_next(self) -> None:
        self._control('skip', 'next_track')

    def skip_previous(self) -> None:
        self._control('go back', 'previous_track')

    def seek(self, position_sec: float) -> None:
        self._control('seek', 'seek_track', int(position_sec * 1000))

    def now_playing(self) -> PlaybackState:
        """Current playback; an empty state when nothing is playing."""
        data = self._spotify.request('playback state', 'current_playback')
        if not data or not data.get('item'):
            return PlaybackState()

        item = data['item']
        artists = item.get('artists') or []
        album_images = (item.get('album') or {}).get('images') or []
        is_playing = bool(data.get('is_playing'))
        return PlaybackState(
            is_playing=is_playing,
            is_paused=not is_playing,
            track_name=item.get('name'),
            artist_name=artists[0].get('name') if artists else None,
            album_art_url=album_images[0].get('url') if album_images else None,
            track_uri=item.get('uri'),
            duration=(item.get('duration_ms') or 0) / 1000.0,
            position=(data.get('progress_ms') or 0) / 1000.0,
        )
