import os
import shutil
import tempfile
from unittest.mock import Mock, patch

import pytest

from discomix.application.explore import ExploreService
from discomix.application.library import PlaylistLibrary
from discomix.application.pipeline import GenerationResult
from discomix.crosscutting.config import ConfigError
from discomix.domain.catalog import find_country
from discomix.domain.entities import Artist, PlaybackState, Playlist
from discomix.domain.errors import ArtistDiscoveryError, NoAccessToken, PlayerUnavailable
from discomix.infrastructure.storage import JsonKeyValueStore
from discomix.interfaces.bootstrap import Services
from discomix.interfaces.cli import CLI


class TestCLI:
    """Tests for CLI commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.library = PlaylistLibrary(JsonKeyValueStore(os.path.join(self.temp_dir, 'library.json')))
        self.discovery = Mock()
        self.generator = Mock()
        self.auth = Mock()
        self.player = Mock()
        self.services = Services(
            secrets=Mock(), auth=self.auth, spotify=Mock(), player=self.player, library=self.library,
            explore=ExploreService(self.discovery, self.generator, self.library),
        )
        self.logging_patcher = patch('discomix.interfaces.cli.setup_logging')
        self.setup_logging = self.logging_patcher.start()
        self.cli = CLI(services=self.services)

    def teardown_method(self):
        """Clean up test fixtures."""
        self.logging_patcher.stop()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _save(self, country='Japan', genre='Rock', spotify_id='sp1'):
        playlist = Playlist(id=spotify_id, name=f'{country} {genre} Mix')
        return self.library.save(playlist, find_country(country), genre)

    def test_parser_commands(self):
        args = self.cli.parser.parse_args(['generate', '--country', 'Japan', '--genre', 'Rock', '--tracks-per-artist', '3'])
        assert args.command == 'generate'
        assert args.tracks_per_artist == 3
        assert args.log_level == 'WARNING'

    def test_no_command_prints_help(self):
        with pytest.raises(SystemExit) as exc_info:
            self.cli.run([])
        assert exc_info.value.code == 1

    def test_log_level_is_applied(self):
        self.cli.run(['countries', '--log-level', 'DEBUG'])
        self.setup_logging.assert_called_once_with(level='DEBUG', log_file=None)

    def test_countries(self, capsys):
        self.cli.run(['countries'])

        out = capsys.readouterr().out
        assert 'Japan (Asia): J-Pop, Enka, City Pop' in out
        assert len(out.strip().splitlines()) == 20

    def test_artists(self, capsys):
        self.discovery.search_artists.return_value = [
            Artist(id='mb1', name='Boris', type='Group', spotify_id='a1'),
            Artist(id='mb2', name='Shonen Knife'),
        ]

        self.cli.run(['artists', '--country', 'Japan', '--genre', 'Rock', '--limit', '2'])

        out = capsys.readouterr().out
        assert 'Boris (Group) [spotify:a1]' in out
        assert 'Shonen Knife (Artist)' in out
        self.discovery.search_artists.assert_called_once_with('Japan', 'Rock', 2)

    def test_artists_none_found(self, capsys):
        self.discovery.search_artists.return_value = []
        self.cli.run(['artists', '--country', 'Japan', '--genre', 'Polka'])
        assert 'No Polka artists found for Japan' in capsys.readouterr().out

    def test_artists_unknown_country(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            self.cli.run(['artists', '--country', 'Atlantis', '--genre', 'Rock'])

        assert exc_info.value.code == 1
        assert 'Unknown country: Atlantis' in capsys.readouterr().err

    def test_artists_discovery_failure(self, capsys):
        self.discovery.search_artists.side_effect = ArtistDiscoveryError('Failed to load artists: HTTP 503')

        with pytest.raises(SystemExit):
            self.cli.run(['artists', '--country', 'Japan', '--genre', 'Rock'])
        assert 'HTTP 503' in capsys.readouterr().err

    def test_failure_is_logged_with_command(self):
        error = ArtistDiscoveryError('Failed to load artists: HTTP 503')
        self.discovery.search_artists.side_effect = error

        with patch('discomix.interfaces.cli.log_error') as mock_log_error:
            with pytest.raises(SystemExit):
                self.cli.run(['artists', '--country', 'Japan', '--genre', 'Rock'])

        args, kwargs = mock_log_error.call_args
        assert args[1:] == ('Artist discovery failed', error)
        assert kwargs == {'command': 'Artist discovery'}

    def test_invalid_limit(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            self.cli.run(['artists', '--country', 'Japan', '--genre', 'Rock', '--limit', '0'])
        assert exc_info.value.code == 1
        assert '--limit must be a positive integer' in capsys.readouterr().err

    def test_generate(self, capsys):
        self.discovery.search_artists.return_value = [Artist(id='mb1', name='Boris', spotify_id='a1')]
        self.generator.generate.return_value = GenerationResult(
            playlist=Playlist(id='sp9', name='Japan Rock Mix', uri='spotify:playlist:sp9'),
            track_uris=['spotify:track:1', 'spotify:track:2'],
            summary={'resolved_artists': 1},
        )

        self.cli.run(['generate', '--country', 'Japan', '--genre', 'Rock'])

        out = capsys.readouterr().out
        assert 'Created playlist: Japan Rock Mix' in out
        assert 'Tracks: 2 from 1/1 artists' in out
        assert self.library.is_saved('sp9')

    def test_generate_not_logged_in(self, capsys):
        self.discovery.search_artists.return_value = []
        self.generator.generate.side_effect = NoAccessToken()

        with pytest.raises(SystemExit):
            self.cli.run(['generate', '--country', 'Japan', '--genre', 'Rock'])
        assert 'Please connect your Spotify account first.' in capsys.readouterr().err

    def test_saved_list_and_filters(self, capsys):
        self._save('Japan', 'Rock', 'sp1')
        self._save('Brazil', 'Samba', 'sp2')

        self.cli.run(['saved', 'list'])
        out = capsys.readouterr().out
        assert 'Japan Rock Mix' in out and 'Brazil Samba Mix' in out

        self.cli.run(['saved', 'list', '--genre', 'samba'])
        out = capsys.readouterr().out
        assert 'Brazil Samba Mix' in out and 'Japan Rock Mix' not in out

    def test_saved_list_empty(self, capsys):
        self.cli.run(['saved', 'list'])
        assert 'No saved playlists' in capsys.readouterr().out

    def test_saved_remove(self, capsys):
        saved = self._save()

        self.cli.run(['saved', 'remove', saved.id])
        self.cli.run(['saved', 'remove', saved.id])

        out = capsys.readouterr().out
        assert f'Removed {saved.id}' in out
        assert f'No saved playlist with id {saved.id}' in out

    def test_saved_clear_and_stats(self, capsys):
        self._save('Japan', 'Rock', 'sp1')
        self._save('Japan', 'Enka', 'sp2')

        self.cli.run(['saved', 'stats'])
        out = capsys.readouterr().out
        assert 'Saved playlists: 2' in out
        assert 'Genres: Enka, Rock' in out

        self.cli.run(['saved', 'clear'])
        assert self.library.total_count == 0

    def test_login(self, capsys):
        self.auth.authorize_url.return_value = 'https://accounts.spotify.com/authorize?x=1'
        self.cli.run(['login'])
        assert 'https://accounts.spotify.com/authorize?x=1' in capsys.readouterr().out

    def test_login_not_configured(self, capsys):
        self.auth.authorize_url.side_effect = ConfigError('SPOTIFY_CLIENT_ID not found in environment')
        with pytest.raises(SystemExit):
            self.cli.run(['login'])
        assert 'SPOTIFY_CLIENT_ID' in capsys.readouterr().err

    def test_logout(self):
        self.cli.run(['logout'])
        self.auth.logout.assert_called_once()

    def test_player_status(self, capsys):
        self.player.now_playing.return_value = PlaybackState(
            is_playing=True, is_paused=False, track_name='Farewell', artist_name='Boris',
            duration=300.0, position=61.0,
        )

        self.cli.run(['player', 'status'])

        out = capsys.readouterr().out
        assert 'Playing: Farewell - Boris' in out
        assert '1:01 / 5:00' in out

    def test_player_status_idle(self, capsys):
        self.player.now_playing.return_value = PlaybackState()
        self.cli.run(['player', 'status'])
        assert 'Nothing is playing' in capsys.readouterr().out

    def test_player_controls(self):
        self.cli.run(['player', 'play'])
        self.cli.run(['player', 'play', 'spotify:playlist:sp1'])
        self.cli.run(['player', 'pause'])
        self.cli.run(['player', 'next'])
        self.cli.run(['player', 'previous'])
        self.cli.run(['player', 'seek', '30'])

        self.player.play.assert_called_once()
        self.player.play_playlist.assert_called_once_with('spotify:playlist:sp1')
        self.player.pause.assert_called_once()
        self.player.skip_next.assert_called_once()
        self.player.skip_previous.assert_called_once()
        self.player.seek.assert_called_once_with(30.0)

    def test_player_unavailable(self, capsys):
        self.player.pause.side_effect = PlayerUnavailable('Failed to connect to Spotify: no device')

        with pytest.raises(SystemExit) as exc_info:
            self.cli.run(['player', 'pause'])

        assert exc_info.value.code == 1
        assert 'no device' in capsys.readouterr().err

    def test_serve(self):
        with patch('discomix.interfaces.http.HTTPServer') as server_cls:
            self.cli.run(['serve', '--port', '8080'])

        server_cls.assert_called_once_with(host='localhost', port=8080, debug=False, services=self.services)
        server_cls.return_value.run.assert_called_once()
