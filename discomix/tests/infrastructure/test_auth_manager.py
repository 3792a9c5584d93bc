import os
import shutil
import tempfile
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from discomix.crosscutting.config import ConfigError, SecretManager
from discomix.domain.errors import BadResponse, DecodeFailure
from discomix.infrastructure.auth import SPOTIFY_TOKEN_URL, SpotifyAuthManager


class TestSpotifyAuthManager:
    """Tests for Spotify login and token storage."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.secrets = SecretManager(self.temp_dir)
        self.session = Mock()
        os.environ['SPOTIFY_CLIENT_ID'] = 'cid'
        os.environ['SPOTIFY_CLIENT_SECRET'] = 'csecret'

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _manager(self):
        return SpotifyAuthManager(self.secrets, session=self.session)

    def _token_response(self, status=200, payload=None):
        response = Mock()
        response.status_code = status
        response.text = 'error body'
        response.json.return_value = payload
        return response

    def test_not_authenticated_without_stored_token(self):
        manager = self._manager()
        assert manager.is_authenticated is False
        assert manager.access_token is None

    def test_loads_stored_token(self):
        self.secrets.save_spotify_access_token('stored-token')
        assert self._manager().access_token == 'stored-token'

    def test_authorize_url(self):
        url = self._manager().authorize_url(state='xyz')
        query = parse_qs(urlparse(url).query)

        assert url.startswith('https://accounts.spotify.com/authorize')
        assert query['client_id'] == ['cid']
        assert query['state'] == ['xyz']
        assert query['redirect_uri'] == ['http://localhost:3000/callback']
        assert 'user-modify-playback-state' in query['scope'][0].split()

    def test_authorize_url_requires_client_config(self):
        del os.environ['SPOTIFY_CLIENT_ID']
        with pytest.raises(ConfigError):
            self._manager().authorize_url()

    def test_handle_callback_stores_token(self):
        self.session.post.return_value = self._token_response(payload={
            'access_token': 'new-token', 'scope': 'playlist-modify-private', 'expires_in': 3600,
        })
        manager = self._manager()

        result = manager.handle_callback('auth-code')

        assert result['access_token'] == 'new-token'
        assert result['scope'] == 'playlist-modify-private'
        assert result['expires_in'] == 3600
        assert 'user-modify-playback-state' in result['missing_scopes']
        assert 'playlist-modify-private' not in result['missing_scopes']
        assert manager.is_authenticated
        assert self.secrets.get_spotify_access_token() == 'new-token'
        args, kwargs = self.session.post.call_args
        assert args == (SPOTIFY_TOKEN_URL,)
        assert kwargs['data']['code'] == 'auth-code'
        assert kwargs['data']['grant_type'] == 'authorization_code'

    def test_handle_callback_with_all_scopes(self):
        self.session.post.return_value = self._token_response(payload={
            'access_token': 'new-token', 'scope': self.secrets.get_spotify_scope_string(),
        })

        result = self._manager().handle_callback('auth-code')

        assert result['missing_scopes'] == []
        assert result['expires_in'] == 3600

    def test_handle_callback_rejected(self):
        self.session.post.return_value = self._token_response(status=400)
        with pytest.raises(BadResponse) as exc_info:
            self._manager().handle_callback('bad-code')
        assert exc_info.value.status == 400

    def test_handle_callback_network_error(self):
        self.session.post.side_effect = requests.Timeout('slow')
        with pytest.raises(BadResponse) as exc_info:
            self._manager().handle_callback('auth-code')
        assert exc_info.value.status == -1

    def test_handle_callback_without_access_token(self):
        self.session.post.return_value = self._token_response(payload={'token_type': 'Bearer'})
        manager = self._manager()
        with pytest.raises(DecodeFailure):
            manager.handle_callback('auth-code')
        assert not manager.is_authenticated

    def test_refresh_is_not_supported(self):
        assert self._manager().refresh_access_token() is False

    def test_logout(self):
        self.secrets.save_spotify_access_token('stored-token')
        manager = self._manager()

        manager.logout()

        assert not manager.is_authenticated
        assert self.secrets.get_spotify_access_token() is None

    def test_logout_without_token(self):
        manager = self._manager()
        manager.logout()
        assert not manager.is_authenticated
