import argparse
import sys
import logging
import signal
import time
from typing import List, Optional

from dotenv import load_dotenv

from discomix.crosscutting.config import ConfigError
from discomix.crosscutting.logging import log_error, setup_logging
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
from discomix.interfaces.bootstrap import Services, build_services
from discomix.interfaces.messages import user_message

COMMAND_ERRORS = (
    ArtistDiscoveryError, BadResponse, ConfigError, CountryNotFound, DecodeFailure,
    InvalidURL, NoAccessToken, NoTracksFound, NotAuthenticated, PlayerUnavailable,
)


class CLI:
    """Command Line Interface for DiscoMix."""

    def __init__(self, services: Optional[Services] = None):
        """Initialize CLI.

        Args:
            services: Pre-wired services; built from configuration on first use otherwise
        """
        self.parser = self._create_parser()
        self._setup_signal_handlers()
        self._start_time = None
        self._services = services

    @property
    def services(self) -> Services:
        if self._services is None:
            self._services = build_services()
        return self._services

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument(
            '--log-level',
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            default='WARNING',
            help='Set logging level'
        )
        common.add_argument(
            '--log-file',
            default=None,
            help='Also write structured logs to this rotating file'
        )

        parser = argparse.ArgumentParser(
            prog='discomix',
            description='Explore music by country and genre and turn it into Spotify playlists'
        )
        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        subparsers.add_parser('countries', parents=[common], help='List countries and their genres')

        artists_parser = subparsers.add_parser('artists', parents=[common], help='Discover artists for a country and genre')
        artists_parser.add_argument('--country', required=True, help='Country name, e.g. "Japan"')
        artists_parser.add_argument('--genre', required=True, help='Genre tag, e.g. "Rock"')
        artists_parser.add_argument('--limit', type=int, default=None, help='Maximum number of artists')

        generate_parser = subparsers.add_parser('generate', parents=[common], help='Generate a Spotify playlist')
        generate_parser.add_argument('--country', required=True, help='Country name')
        generate_parser.add_argument('--genre', required=True, help='Genre tag')
        generate_parser.add_argument(
            '--tracks-per-artist',
            type=int,
            default=None,
            help='Top tracks taken from each artist (default from env or 2)'
        )
        generate_parser.add_argument(
            '--limit',
            type=int,
            default=None,
            help='Maximum number of artists (default from env or 10)'
        )

        saved_parser = subparsers.add_parser('saved', help='Manage locally saved playlists')
        saved_sub = saved_parser.add_subparsers(dest='saved_command', help='Saved playlist commands')
        list_parser = saved_sub.add_parser('list', parents=[common], help='List saved playlists')
        list_parser.add_argument('--search', default='', help='Match name, country or genre')
        list_parser.add_argument('--country', default=None, help='Only playlists for this country')
        list_parser.add_argument('--genre', default=None, help='Only playlists for this genre')
        remove_parser = saved_sub.add_parser('remove', parents=[common], help='Remove a saved playlist')
        remove_parser.add_argument('playlist_id', help='Local id of the saved playlist')
        saved_sub.add_parser('clear', parents=[common], help='Remove every saved playlist')
        saved_sub.add_parser('stats', parents=[common], help='Show library statistics')

        subparsers.add_parser('login', parents=[common], help='Print the Spotify authorization URL')
        subparsers.add_parser('logout', parents=[common], help='Forget the stored Spotify token')

        player_parser = subparsers.add_parser('player', help='Control playback on a Spotify device')
        player_sub = player_parser.add_subparsers(dest='player_command', help='Player commands')
        player_sub.add_parser('status', parents=[common], help='Show what is playing')
        play_parser = player_sub.add_parser('play', parents=[common], help='Resume, or play a playlist URI')
        play_parser.add_argument('uri', nargs='?', default=None, help='spotify:playlist:... to start')
        player_sub.add_parser('pause', parents=[common], help='Pause playback')
        player_sub.add_parser('next', parents=[common], help='Skip to the next track')
        player_sub.add_parser('previous', parents=[common], help='Go back to the previous track')
        seek_parser = player_sub.add_parser('seek', parents=[common], help='Seek within the current track')
        seek_parser.add_argument('seconds', type=float, help='Position in seconds')

        serve_parser = subparsers.add_parser('serve', parents=[common], help='Run the HTTP server')
        serve_parser.add_argument('--host', default='localhost', help='Bind address (default: localhost)')
        serve_parser.add_argument('--port', type=int, default=3000, help='Port (default: 3000)')
        serve_parser.add_argument('--debug', action='store_true', help='Enable Flask debug mode')

        return parser

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            logger = logging.getLogger(__name__)
            logger.warning(f"Received signal {signum}, shutting down gracefully...")
            self._cleanup_resources()
            sys.exit(130)  # Standard exit code for signal termination

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def _cleanup_resources(self) -> None:
        """Clean up resources on exit."""
        logger = logging.getLogger(__name__)
        if self._start_time:
            duration = time.time() - self._start_time
            logger.info(f"CLI execution time: {duration:.2f}s")

    def _validate_arguments(self, args: argparse.Namespace) -> None:
        """Validate CLI arguments."""
        for name in ('limit', 'tracks_per_artist'):
            value = getattr(args, name, None)
            if value is not None and value <= 0:
                raise ValueError(f"--{name.replace('_', '-')} must be a positive integer")
        if getattr(args, 'seconds', None) is not None and args.seconds < 0:
            raise ValueError("Seek position must not be negative")

    def _setup_logging(self, level: str, log_file: Optional[str] = None) -> None:
        """Setup logging configuration."""
        setup_logging(level=level, log_file=log_file)

    def _fail(self, action: str, error: Exception) -> None:
        logger = logging.getLogger(__name__)
        log_error(logger, f"{action} failed", error, command=action)
        print(f"Error: {user_message(error)}", file=sys.stderr)
        sys.exit(1)

    def _list_countries(self, args: argparse.Namespace) -> None:
        """Print the country catalog."""
        for country in self.services.explore.countries():
            genres = ', '.join(country.genres)
            print(f"{country.flag} {country.name} ({country.region}): {genres}")

    def _list_artists(self, args: argparse.Namespace) -> None:
        """Discover artists for a country and genre."""
        try:
            country = self.services.explore.country(args.country)
            artists = self.services.explore.discover_artists(country.name, args.genre, args.limit)
        except COMMAND_ERRORS as e:
            self._fail("Artist discovery", e)
            return

        if not artists:
            print(f"No {args.genre} artists found for {country.name}")
            return

        print(f"{args.genre} artists from {country.name}:")
        print("-" * 50)
        for artist in artists:
            line = artist.name
            if artist.display_info:
                line += f" ({artist.display_info})"
            if artist.spotify_id:
                line += f" [spotify:{artist.spotify_id}]"
            print(line)

    def _generate_playlist(self, args: argparse.Namespace) -> None:
        """Generate a playlist and save it to the local library."""
        logger = logging.getLogger(__name__)
        try:
            logger.info(f"Generating playlist for {args.country} / {args.genre}")
            result = self.services.explore.generate_for_country(
                args.country,
                args.genre,
                tracks_per_artist=args.tracks_per_artist,
                artist_limit=args.limit,
            )
        except COMMAND_ERRORS as e:
            self._fail("Playlist generation", e)
            return

        playlist = result.generation.playlist
        summary = result.generation.summary
        print(f"Created playlist: {playlist.name}")
        print(f"Spotify URI: {playlist.uri}")
        print(f"Tracks: {len(result.generation.track_uris)} from "
              f"{summary.get('resolved_artists', 0)}/{len(result.artists)} artists")
        print(f"Saved as: {result.saved.id}")

    def _saved(self, args: argparse.Namespace) -> None:
        """Manage the saved playlist library."""
        library = self.services.library
        command = args.saved_command

        if command == 'list':
            playlists = library.search(args.search)
            if args.country:
                ids = {p.id for p in library.for_country(args.country)}
                playlists = [p for p in playlists if p.id in ids]
            if args.genre:
                ids = {p.id for p in library.for_genre(args.genre)}
                playlists = [p for p in playlists if p.id in ids]

            if not playlists:
                print("No saved playlists")
                return
            for saved in playlists:
                created = saved.created_at.strftime('%Y-%m-%d %H:%M')
                print(f"{saved.id}: {saved.country_flag} {saved.name} "
                      f"({saved.genre}, tracks: {saved.track_count}, created {created})")
        elif command == 'remove':
            if library.remove(args.playlist_id):
                print(f"Removed {args.playlist_id}")
            else:
                print(f"No saved playlist with id {args.playlist_id}")
        elif command == 'clear':
            library.clear_all()
            print("Cleared all saved playlists")
        elif command == 'stats':
            print(f"Saved playlists: {library.total_count}")
            print(f"Countries: {', '.join(library.unique_countries) or '-'}")
            print(f"Genres: {', '.join(library.unique_genres) or '-'}")
        else:
            self.parser.parse_args(['saved', '--help'])

    def _login(self, args: argparse.Namespace) -> None:
        """Print the Spotify authorization URL."""
        try:
            url = self.services.auth.authorize_url()
        except ConfigError as e:
            self._fail("Login", e)
            return
        print("Open this URL to connect your Spotify account:")
        print(url)
        print("Then run `discomix serve` so the callback can store the token.")

    def _logout(self, args: argparse.Namespace) -> None:
        self.services.auth.logout()
        print("Logged out of Spotify")

    def _player(self, args: argparse.Namespace) -> None:
        """Drive playback on the user's active Spotify device."""
        player = self.services.player
        command = args.player_command
        try:
            if command == 'status':
                state = player.now_playing()
                if not state.track_name:
                    print("Nothing is playing")
                    return
                status = "Playing" if state.is_playing else "Paused"
                print(f"{status}: {state.track_name} - {state.artist_name}")
                print(f"{state.formatted_position} / {state.formatted_duration}")
            elif command == 'play':
                if args.uri:
                    player.play_playlist(args.uri)
                else:
                    player.play()
                print("Playback started")
            elif command == 'pause':
                player.pause()
                print("Playback paused")
            elif command == 'next':
                player.skip_next()
                print("Skipped to next track")
            elif command == 'previous':
                player.skip_previous()
                print("Went back to previous track")
            elif command == 'seek':
                player.seek(args.seconds)
                print(f"Seeked to {args.seconds:.0f}s")
            else:
                self.parser.parse_args(['player', '--help'])
        except COMMAND_ERRORS as e:
            self._fail(f"Player {command}", e)

    def _serve(self, args: argparse.Namespace) -> None:
        """Run the HTTP interface."""
        from discomix.interfaces.http import HTTPServer

        server = HTTPServer(host=args.host, port=args.port, debug=args.debug, services=self.services)
        server.run()

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Run the CLI."""
        self._start_time = time.time()

        try:
            args = self.parser.parse_args(argv)

            if not args.command:
                self.parser.print_help()
                sys.exit(1)

            self._setup_logging(getattr(args, 'log_level', 'WARNING'), getattr(args, 'log_file', None))

            self._validate_arguments(args)

            handlers = {
                'countries': self._list_countries,
                'artists': self._list_artists,
                'generate': self._generate_playlist,
                'saved': self._saved,
                'login': self._login,
                'logout': self._logout,
                'player': self._player,
                'serve': self._serve,
            }
            handlers[args.command](args)

        except KeyboardInterrupt:
            logger = logging.getLogger(__name__)
            logger.warning("Operation cancelled by user")
            sys.exit(130)
        except (ValueError, ConfigError) as e:
            logger = logging.getLogger(__name__)
            logger.error(f"CLI error: {e}")
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        finally:
            self._cleanup_resources()


def main():
    """Main entry point."""
    load_dotenv()
    cli = CLI()
    cli.run()


if __name__ == '__main__':
    main()
