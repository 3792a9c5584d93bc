import os
import json
from typing import Dict, Any, Optional
from pathlib import Path

from dotenv import dotenv_values


class ConfigError(Exception):
    """Configuration error."""
    pass


DEFAULT_REDIRECT_URI = 'http://localhost:3000/callback'
DEFAULT_USER_AGENT = 'DiscoMix/1.0 (contact@example.com)'


class SecretManager:
    """Manages application secrets and configuration.

    Values are looked up in the process environment first, then in the
    ``.env`` file of the config directory.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize secret manager."""
        if config_dir is None:
            config_dir = os.getenv('DISCOMIX_CONFIG_DIR')
        self.config_dir = Path(config_dir) if config_dir else Path.home() / '.discomix'
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.tokens_file = self.config_dir / 'tokens.json'
        self.env_file = self.config_dir / '.env'
        self.library_file = self.config_dir / 'library.json'

    def get_spotify_scopes(self) -> list:
        """Spotify scopes needed for playlist generation and playback control."""
        return [
            'user-read-private',
            'user-read-email',
            'playlist-read-private',
            'playlist-modify-public',
            'playlist-modify-private',
            'user-read-playback-state',
            'user-modify-playback-state',
            'user-read-currently-playing',
        ]

    def get_spotify_scope_string(self) -> str:
        """Get Spotify scopes as space-separated string."""
        return ' '.join(self.get_spotify_scopes())

    def validate_spotify_scopes(self, scopes: str) -> bool:
        """Validate that provided scopes include all required ones."""
        provided_scopes = set(scopes.split())
        required_scopes = set(self.get_spotify_scopes())

        return required_scopes.issubset(provided_scopes)

    def get_missing_spotify_scopes(self, scopes: str) -> list:
        """Get list of missing required Spotify scopes."""
        provided_scopes = set(scopes.split())
        return [scope for scope in self.get_spotify_scopes() if scope not in provided_scopes]

    def load_tokens(self) -> Dict[str, Any]:
        """Load tokens from tokens.json file."""
        if not self.tokens_file.exists():
            return {}

        try:
            with open(self.tokens_file, 'r') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigError(f"Failed to load tokens from {self.tokens_file}: {e}")

    def _write_tokens(self, tokens: Dict[str, Any]) -> None:
        """Replace tokens.json atomically, readable by the owner only."""
        tmp_path = self.tokens_file.with_suffix('.json.tmp')
        try:
            with open(tmp_path, 'w') as f:
                json.dump(tokens, f, indent=2, ensure_ascii=False)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.tokens_file)
        except OSError as e:
            raise ConfigError(f"Failed to save tokens to {self.tokens_file}: {e}")

    def save_tokens(self, tokens: Dict[str, Any]) -> None:
        """Save tokens to tokens.json file."""
        existing_tokens = self.load_tokens()
        existing_tokens.update(tokens)
        self._write_tokens(existing_tokens)

    def get_spotify_access_token(self) -> Optional[str]:
        """Get the stored Spotify access token."""
        tokens = self.load_tokens()
        return (tokens.get('spotify') or {}).get('access_token')

    def save_spotify_access_token(self, access_token: str, **extra: Any) -> None:
        """Save the Spotify access token, with optional metadata (scope, expires_at)."""
        self.save_tokens({
            'spotify': {
                'access_token': access_token,
                **extra
            }
        })

    def delete_spotify_tokens(self) -> bool:
        """Remove Spotify tokens. Returns False when there was nothing to remove."""
        tokens = self.load_tokens()
        if 'spotify' not in tokens:
            return False
        del tokens['spotify']
        self._write_tokens(tokens)
        return True

    def load_env_vars(self) -> Dict[str, str]:
        """Load variables from the .env file."""
        if not self.env_file.exists():
            return {}
        try:
            return {k: v for k, v in dotenv_values(self.env_file).items() if v is not None}
        except IOError as e:
            raise ConfigError(f"Failed to load .env file {self.env_file}: {e}")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look a setting up in the environment, then in .env."""
        value = os.getenv(key)
        if value is not None and value.strip():
            return value
        return self.load_env_vars().get(key, default)

    def get_int(self, key: str, default: int) -> int:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ConfigError(f"{key} must be an integer, got {raw!r}")
        if value <= 0:
            raise ConfigError(f"{key} must be positive, got {value}")
        return value

    def get_spotify_client_config(self) -> Dict[str, str]:
        """Get Spotify client configuration."""
        client_id = self.get('SPOTIFY_CLIENT_ID')
        client_secret = self.get('SPOTIFY_CLIENT_SECRET')
        redirect_uri = self.get('SPOTIFY_REDIRECT_URI', DEFAULT_REDIRECT_URI)

        if not client_id:
            raise ConfigError("SPOTIFY_CLIENT_ID not found in environment")
        if not client_secret:
            raise ConfigError("SPOTIFY_CLIENT_SECRET not found in environment")

        return {
            'client_id': client_id,
            'client_secret': client_secret,
            'redirect_uri': redirect_uri
        }

    def get_tracks_per_artist(self) -> int:
        return self.get_int('DISCOMIX_TRACKS_PER_ARTIST', 2)

    def get_artist_limit(self) -> int:
        return self.get_int('DISCOMIX_ARTIST_LIMIT', 10)

    def get_musicbrainz_user_agent(self) -> str:
        return self.get('MUSICBRAINZ_USER_AGENT', DEFAULT_USER_AGENT)


_secret_manager: Optional[SecretManager] = None


def get_secret_manager() -> SecretManager:
    """Get global secret manager instance, creating it on first use."""
    global _secret_manager
    if _secret_manager is None:
        _secret_manager = SecretManager()
    return _secret_manager

