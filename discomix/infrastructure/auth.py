import logging
import time
from typing import Any, Dict, Optional

import requests
from spotipy.cache_handler import MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth

from discomix.crosscutting.config import SecretManager
from discomix.domain.errors import BadResponse, DecodeFailure

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = 'https://accounts.spotify.com/api/token'


class SpotifyAuthManager:
    """Keeps the Spotify access token and runs the authorization-code login."""

    def __init__(self, secret_manager: SecretManager, session: Optional[requests.Session] = None):
        self._secrets = secret_manager
        self._session = session or requests.Session()
        self._access_token: Optional[str] = secret_manager.get_spotify_access_token()

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._access_token)

    def _oauth(self) -> SpotifyOAuth:
        config = self._secrets.get_spotify_client_config()
        return SpotifyOAuth(
            client_id=config['client_id'],
            client_secret=config['client_secret'],
            redirect_uri=config['redirect_uri'],
            scope=self._secrets.get_spotify_scope_string(),
            cache_handler=MemoryCacheHandler(),
            open_browser=False,
            show_dialog=True,
        )

    def authorize_url(self, state: Optional[str] = None) -> str:
        """URL the user opens to grant access."""
        return self._oauth().get_authorize_url(state=state)

    def handle_callback(self, code: str) -> Dict[str, Any]:
        """Exchange an authorization code for tokens and keep the access token.

        Raises:
            ConfigError: client credentials missing
            BadResponse: token endpoint refused the code
            DecodeFailure: token endpoint answered without an access token
        """
        config = self._secrets.get_spotify_client_config()
        data = {
            'grant_type': 'authorization_code',
            'code': code,
            'redirect_uri': config['redirect_uri'],
            'client_id': config['client_id'],
            'client_secret': config['client_secret'],
        }

        try:
            response = self._session.post(SPOTIFY_TOKEN_URL, data=data, timeout=15)
        except requests.RequestException as e:
            raise BadResponse(-1, f"Token exchange failed: {e}")

        if response.status_code != 200:
            logger.error(f"Token exchange failed: {response.status_code} - {response.text}")
            raise BadResponse(response.status_code, response.text)

        try:
            tokens = response.json()
            access_token = tokens['access_token']
        except (ValueError, KeyError) as e:
            raise DecodeFailure(f"Token response missing access_token: {e}")

        expires_in = tokens.get('expires_in', 3600)
        granted = tokens.get('scope') or ''
        self.save_access_token(
            access_token,
            scope=tokens.get('scope'),
            expires_at=time.time() + expires_in,
        )
        logger.info("Successfully authenticated with Spotify")

        missing_scopes = []
        if not self._secrets.validate_spotify_scopes(granted):
            missing_scopes = self._secrets.get_missing_spotify_scopes(granted)
            logger.warning(f"Spotify login lacks scopes: {', '.join(missing_scopes)}")

        return {
            'access_token': access_token,
            'scope': tokens.get('scope'),
            'expires_in': expires_in,
            'missing_scopes': missing_scopes,
        }

    def save_access_token(self, access_token: str, **extra: Any) -> None:
        self._secrets.save_spotify_access_token(access_token, **extra)
        self._access_token = access_token

    def refresh_access_token(self) -> bool:
        """Token refresh is not supported; callers must log in again."""
        logger.warning("Spotify token refresh requested but not supported")
        return False

    def logout(self) -> None:
        if not self._secrets.delete_spotify_tokens():
            logger.info("No Spotify token stored to delete")
        self._access_token = None
