import os
import logging
from typing import Any, Dict, Optional
from datetime import datetime

from flask import Flask, request, jsonify

from discomix.crosscutting.config import ConfigError
from discomix.crosscutting.logging import log_error
from discomix.domain import catalog
from discomix.domain.entities import Artist, Country
from discomix.domain.errors import (
    ArtistDiscoveryError,
    BadResponse,
    CountryNotFound,
    DecodeFailure,
    InvalidURL,
    NoAccessToken,
    NoTracksFound,
    NotAuthenticated,
    PlayerUnavailable,
)
from discomix.domain.globe import place_markers
from discomix.interfaces.bootstrap import Services, build_services
from discomix.interfaces.messages import http_status_for, user_message

VERSION = "0.1.0"

HANDLED_ERRORS = (
    ArtistDiscoveryError, BadResponse, CountryNotFound, DecodeFailure, InvalidURL,
    NoAccessToken, NoTracksFound, NotAuthenticated, PlayerUnavailable,
)


def country_to_json(country: Country, marker=None) -> Dict[str, Any]:
    data = {
        'id': country.id,
        'name': country.name,
        'capital': country.capital,
        'latitude': country.latitude,
        'longitude': country.longitude,
        'population': country.population,
        'flag': country.flag,
        'region': country.region,
        'currency': country.currency,
        'genres': list(country.genres),
    }
    if marker is not None:
        data['marker'] = marker.to_json()
    return data


def artist_to_json(artist: Artist) -> Dict[str, Any]:
    return {
        'id': artist.id,
        'name': artist.name,
        'spotifyId': artist.spotify_id,
        'type': artist.type,
        'country': artist.country,
        'disambiguation': artist.disambiguation,
        'displayInfo': artist.display_info,
    }


class HTTPServer:
    """HTTP server for DiscoMix: health, Spotify login, exploring and playlists."""

    def __init__(self, host: str = 'localhost', port: int = 3000, debug: bool = False,
                 services: Optional[Services] = None):
        """Initialize HTTP server."""
        self.host = host
        self.port = port
        self.debug = debug
        self.app = Flask(__name__)
        self.logger = logging.getLogger(__name__)

        self.version = VERSION
        self.commit = os.getenv('GIT_COMMIT', 'unknown')

        self.services = services or build_services()

        self._setup_error_handlers()
        self._setup_routes()

    def _setup_error_handlers(self) -> None:
        """Translate domain failures into JSON error responses."""

        def handle_domain_error(error: Exception):
            status = http_status_for(error)
            log_error(self.logger, f"{request.method} {request.path} failed", error,
                      method=request.method, path=request.path, status=status)
            return jsonify({'error': user_message(error), 'type': type(error).__name__}), status

        for error_class in HANDLED_ERRORS:
            self.app.register_error_handler(error_class, handle_domain_error)

    def _json_body(self) -> Dict[str, Any]:
        return request.get_json(silent=True) or {}

    @staticmethod
    def _positive_int(body: Dict[str, Any], key: str) -> Optional[int]:
        """Optional positive integer field of a JSON body."""
        value = body.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"{key} must be a positive integer")
        return value

    def _setup_routes(self) -> None:
        """Setup Flask routes."""
        app = self.app
        services = self.services

        @app.route('/health', methods=['GET'])
        def health_check():
            """Health check endpoint."""
            return jsonify({
                'status': 'healthy',
                'version': self.version,
                'commit': self.commit,
                'authenticated': services.auth.is_authenticated,
                'timestamp': datetime.now().isoformat()
            }), 200

        @app.route('/', methods=['GET'])
        def root():
            """Root endpoint with basic info."""
            return jsonify({
                'service': 'DiscoMix HTTP Interface',
                'version': self.version,
                'endpoints': {
                    'health': '/health',
                    'spotify_auth': '/auth/spotify',
                    'oauth_callback': '/callback',
                    'countries': '/countries',
                    'playlists': '/playlists',
                    'player': '/player'
                }
            }), 200

        @app.route('/auth/spotify', methods=['GET'])
        def spotify_auth():
            """Start the Spotify OAuth flow."""
            try:
                auth_url = services.auth.authorize_url(state=request.args.get('state'))
            except ConfigError as e:
                self.logger.error(f"Spotify auth error: {e}")
                return jsonify({'error': 'Spotify client not configured', 'details': str(e)}), 500

            return jsonify({'auth_url': auth_url}), 200

        @app.route('/callback', methods=['GET'])
        def oauth_callback():
            """OAuth callback endpoint for Spotify."""
            code = request.args.get('code')
            error = request.args.get('error')

            if error:
                self.logger.error(f"OAuth error: {error}")
                return jsonify({'error': 'OAuth authorization failed', 'details': error}), 400

            if not code:
                return jsonify({'error': 'Missing authorization code'}), 400

            self.logger.info(f"Received OAuth code: {code[:10]}...")
            try:
                tokens = services.auth.handle_callback(code)
            except ConfigError as e:
                return jsonify({'error': 'Spotify client not configured', 'details': str(e)}), 500
            except (BadResponse, DecodeFailure) as e:
                self.logger.error(f"Token exchange failed: {e}")
                return jsonify({'error': 'Failed to exchange code for tokens'}), 502

            return jsonify({
                'status': 'success',
                'message': 'Spotify account connected',
                'scope': tokens.get('scope'),
                'missing_scopes': tokens.get('missing_scopes', []),
                'timestamp': datetime.now().isoformat()
            }), 200

        @app.route('/auth/logout', methods=['POST'])
        def logout():
            services.auth.logout()
            services.player.disconnect()
            return jsonify({'status': 'logged_out'}), 200

        @app.route('/countries', methods=['GET'])
        def list_countries():
            countries = services.explore.countries()
            markers = place_markers(countries)
            return jsonify({
                'countries': [country_to_json(c, markers[c.id]) for c in countries],
                'genres': catalog.all_genres()
            }), 200

        @app.route('/countries/<name>', methods=['GET'])
        def get_country(name):
            country = services.explore.country(name)
            return jsonify(country_to_json(country, place_markers([country])[country.id])), 200

        @app.route('/countries/<name>/artists', methods=['GET'])
        def country_artists(name):
            genre = request.args.get('genre')
            if not genre:
                return jsonify({'error': 'Missing genre parameter'}), 400
            limit = request.args.get('limit', type=int)
            if limit is not None and limit <= 0:
                return jsonify({'error': 'limit must be a positive integer'}), 400
            country = services.explore.country(name)
            artists = services.explore.discover_artists(country.name, genre, limit)
            return jsonify({
                'country': country.name,
                'genre': genre,
                'artists': [artist_to_json(a) for a in artists]
            }), 200

        @app.route('/artists/image', methods=['GET'])
        def artist_image():
            name = request.args.get('name')
            if not name:
                return jsonify({'error': 'Missing name parameter'}), 400
            artist = Artist(id=request.args.get('id', ''), name=name,
                            spotify_id=request.args.get('spotifyId'))
            return jsonify({'name': name, 'imageUrl': services.spotify.artist_image_url(artist)}), 200

        @app.route('/playlists', methods=['GET'])
        def list_playlists():
            library = services.library
            playlists = library.search(request.args.get('q', ''))
            country = request.args.get('country')
            genre = request.args.get('genre')
            if country:
                ids = {p.id for p in library.for_country(country)}
                playlists = [p for p in playlists if p.id in ids]
            if genre:
                ids = {p.id for p in library.for_genre(genre)}
                playlists = [p for p in playlists if p.id in ids]
            return jsonify({
                'playlists': [p.to_json() for p in playlists],
                'count': len(playlists),
                'total': library.total_count
            }), 200

        @app.route('/playlists', methods=['POST'])
        def generate_playlist():
            body = self._json_body()
            country = body.get('country')
            genre = body.get('genre')
            if not country or not genre:
                return jsonify({'error': 'Both country and genre are required'}), 400

            try:
                tracks_per_artist = self._positive_int(body, 'tracksPerArtist')
                artist_limit = self._positive_int(body, 'artistLimit')
            except ValueError as e:
                return jsonify({'error': str(e)}), 400

            result = services.explore.generate_for_country(
                country, genre,
                tracks_per_artist=tracks_per_artist,
                artist_limit=artist_limit,
            )
            return jsonify({
                'saved': result.saved.to_json(),
                'playlist': result.generation.playlist.to_json(),
                'summary': result.generation.summary
            }), 201

        @app.route('/playlists', methods=['DELETE'])
        def clear_playlists():
            services.library.clear_all()
            return jsonify({'status': 'cleared'}), 200

        @app.route('/playlists/stats', methods=['GET'])
        def playlist_stats():
            library = services.library
            return jsonify({
                'total': library.total_count,
                'countries': library.unique_countries,
                'genres': library.unique_genres
            }), 200

        @app.route('/playlists/<playlist_id>', methods=['GET'])
        def get_playlist(playlist_id):
            playlist = services.explore.open_saved(playlist_id)
            if playlist is None:
                return jsonify({'error': 'Saved playlist not found'}), 404
            return jsonify(playlist.to_json()), 200

        @app.route('/playlists/<playlist_id>', methods=['DELETE'])
        def delete_playlist(playlist_id):
            removed = services.library.remove(playlist_id)
            return jsonify({'removed': removed}), 200

        @app.route('/player', methods=['GET'])
        def player_state():
            return jsonify(services.player.now_playing().to_json()), 200

        @app.route('/player/<action>', methods=['POST'])
        def player_action(action):
            player = services.player
            if action == 'seek':
                position = self._json_body().get('position')
                if position is None:
                    return jsonify({'error': 'Missing position'}), 400
                if isinstance(position, bool) or not isinstance(position, (int, float)) or position < 0:
                    return jsonify({'error': 'position must be a non-negative number of seconds'}), 400
                player.seek(float(position))
            elif action == 'play':
                uri = self._json_body().get('uri')
                if uri:
                    player.play_playlist(uri)
                else:
                    player.play()
            elif action == 'pause':
                player.pause()
            elif action == 'next':
                player.skip_next()
            elif action == 'previous':
                player.skip_previous()
            else:
                return jsonify({'error': f'Unknown player action: {action}'}), 404
            return jsonify({'status': 'ok', 'action': action}), 200

    def run(self) -> None:
        """Run the HTTP server."""
        self.logger.info(f"Starting DiscoMix HTTP server on {self.host}:{self.port}")
        self.app.run(
            host=self.host,
            port=self.port,
            debug=self.debug
        )


def create_app(services: Optional[Services] = None) -> Flask:
    """Create Flask app (used by tests and WSGI servers)."""
    server = HTTPServer(services=services)
    return server.app
