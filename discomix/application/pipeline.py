import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from discomix.crosscutting.logging import CorrelationContext, log_generation_complete, log_generation_start
from discomix.domain.entities import Artist, Playlist
from discomix.domain.errors import NoTracksFound
from discomix.domain.ports import MusicService

logger = logging.getLogger(__name__)

DEFAULT_TRACKS_PER_ARTIST = 2


class GenerationProgress:
    """Tracks artist resolution and logs periodic updates."""

    def __init__(self, total_artists: int, progress_every: int = 5):
        """Initialize progress tracker.

        Args:
            total_artists: Number of artists to process
            progress_every: Log an update after this many artists
        """
        self.total_artists = total_artists
        self.processed_artists = 0
        self.resolved_artists = 0
        self.searched_artists = 0
        self.skipped_artists: List[str] = []
        self.collected_tracks = 0
        self.progress_every = progress_every
        self.start_time = time.time()

    def update(self, artist: Artist, spotify_id: Optional[str], searched: bool, track_count: int = 0) -> None:
        """Record the outcome for one artist.

        Args:
            artist: Artist being processed
            spotify_id: Resolved id, None when the artist was skipped
            searched: Whether a name search was needed
            track_count: Number of track URIs taken from this artist
        """
        self.processed_artists += 1
        if searched:
            self.searched_artists += 1
        if spotify_id:
            self.resolved_artists += 1
            self.collected_tracks += track_count
        else:
            self.skipped_artists.append(artist.name)

        if self.processed_artists % self.progress_every == 0:
            logger.info(f"Progress: {self.processed_artists}/{self.total_artists} artists, "
                        f"resolved: {self.resolved_artists}, skipped: {len(self.skipped_artists)}, "
                        f"tracks: {self.collected_tracks}")

    def get_final_summary(self) -> Dict[str, Any]:
        """Get final progress summary."""
        return {
            "total_artists": self.total_artists,
            "resolved_artists": self.resolved_artists,
            "searched_artists": self.searched_artists,
            "skipped_artists": list(self.skipped_artists),
            "collected_tracks": self.collected_tracks,
            "total_time_seconds": time.time() - self.start_time,
        }


def dedupe_uris(uris: List[str]) -> List[str]:
    """Drop repeated URIs, keeping first-seen order."""
    return list(dict.fromkeys(uris))


def playlist_name(country_name: str, genre: str) -> str:
    return f"{country_name} {genre} Mix"


def playlist_description(country_name: str, genre: str) -> str:
    return f"Generated with DiscoMix: top {genre} tracks from {country_name}."


@dataclass
class GenerationResult:
    """Generated playlist plus what it took to build it."""

    playlist: Playlist
    track_uris: List[str]
    summary: Dict[str, Any]


class PlaylistGenerator:
    """Builds a new playlist from the top tracks of discovered artists.

    Every step runs sequentially and any failure propagates to the caller;
    a playlist that was created before a later step failed is left as is.
    """

    def __init__(self, music: MusicService, tracks_per_artist: int = DEFAULT_TRACKS_PER_ARTIST):
        self.music = music
        self.tracks_per_artist = tracks_per_artist

    def _resolve_artist_id(self, artist: Artist, market: str, genre: str) -> Optional[str]:
        if artist.spotify_id:
            return artist.spotify_id
        return self.music.search_artist(artist.name, market=market, genre_hint=genre)

    def collect_track_uris(self, artists: List[Artist], market: str, genre: str,
                           tracks_per_artist: Optional[int] = None,
                           progress: Optional[GenerationProgress] = None) -> List[str]:
        """Resolve each artist and gather its leading top-track URIs, deduplicated."""
        per_artist = self.tracks_per_artist if tracks_per_artist is None else tracks_per_artist
        if per_artist <= 0:
            raise ValueError(f"tracks_per_artist must be positive, got {per_artist}")
        progress = progress or GenerationProgress(len(artists))
        collected: List[str] = []

        for artist in artists:
            spotify_id = self._resolve_artist_id(artist, market, genre)
            searched = not artist.spotify_id
            if not spotify_id:
                logger.debug(f"Skipping unresolved artist: {artist.name}")
                progress.update(artist, None, searched)
                continue

            top_tracks = self.music.artist_top_tracks(spotify_id, market)
            chosen = [t.uri for t in top_tracks[:per_artist]]
            collected.extend(chosen)
            progress.update(artist, spotify_id, searched, len(chosen))

        return dedupe_uris(collected)

    def generate(self, country_name: str, genre: str, artists: List[Artist], market: str,
                 tracks_per_artist: Optional[int] = None) -> GenerationResult:
        """Run the full pipeline.

        Args:
            country_name: Used for the playlist title and description
            genre: Used for the title, description and search bias
            artists: Discovered artists, in priority order
            market: Spotify market code for search and top tracks
            tracks_per_artist: Overrides the generator default

        Returns:
            GenerationResult holding the re-fetched playlist

        Raises:
            NoTracksFound: no artist yielded a track; no playlist is created
        """
        generation_id = uuid.uuid4().hex[:12]
        log_generation_start(logger, generation_id, country_name, genre, len(artists), market=market)

        with CorrelationContext(generation_id=generation_id, country=country_name, genre=genre):
            with CorrelationContext(stage='profile'):
                user_id = self.music.current_user_id()

            progress = GenerationProgress(len(artists))
            with CorrelationContext(stage='collect'):
                uris = self.collect_track_uris(artists, market, genre, tracks_per_artist, progress)

            summary = progress.get_final_summary()
            logger.info(f"Final collection summary: {summary}")

            if not uris:
                raise NoTracksFound(f"No tracks found for {genre} artists from {country_name}")

            with CorrelationContext(stage='write'):
                created = self.music.create_playlist(
                    user_id,
                    playlist_name(country_name, genre),
                    description=playlist_description(country_name, genre),
                    public=False,
                )
                self.music.add_tracks(created.id, uris)

            with CorrelationContext(stage='fetch'):
                playlist = self.music.fetch_playlist(created.id, market=market)

        log_generation_complete(logger, generation_id, playlist.id, len(uris))
        return GenerationResult(playlist=playlist, track_uris=uris, summary=summary)
