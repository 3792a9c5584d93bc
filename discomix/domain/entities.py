from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Country:
    """Static catalog entry for a country shown on the globe."""

    id: str
    name: str
    capital: str
    latitude: float
    longitude: float
    population: int
    flag: str
    region: str
    currency: Optional[str] = None
    genres: tuple = ()


@dataclass(frozen=True)
class Artist:
    """Artist discovered through MusicBrainz."""

    id: str
    name: str
    spotify_id: Optional[str] = None
    type: Optional[str] = None
    country: Optional[str] = None
    disambiguation: Optional[str] = None

    @property
    def display_info(self) -> str:
        if self.disambiguation:
            return self.disambiguation
        return self.type or "Artist"


@dataclass(frozen=True)
class Track:
    """Track as returned by the streaming service."""

    id: Optional[str] = None
    name: str = ""
    uri: str = ""
    artists: List[str] = None
    album: Optional[str] = None
    album_image_url: Optional[str] = None
    duration_ms: int = 0

    def __post_init__(self):
        if self.artists is None:
            object.__setattr__(self, 'artists', [])

    @classmethod
    def from_spotify(cls, data: Dict[str, Any]) -> "Track":
        album = data.get('album') or {}
        album_images = album.get('images') or []
        return cls(
            id=data.get('id'),
            name=data.get('name', ''),
            uri=data['uri'],
            artists=[a.get('name', '') for a in data.get('artists') or [] if a.get('name')],
            album=album.get('name'),
            album_image_url=album_images[0].get('url') if album_images else None,
            duration_ms=data.get('duration_ms') or 0,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "uri": self.uri,
            "artists": list(self.artists),
            "album": self.album,
            "albumImageUrl": self.album_image_url,
            "durationMs": self.duration_ms,
        }


@dataclass(frozen=True)
class Playlist:
    """Playlist as returned by the streaming service."""

    id: str
    name: str
    uri: Optional[str] = None
    description: Optional[str] = None
    images: List[str] = field(default_factory=list)
    tracks: Optional[List[Track]] = None

    @classmethod
    def from_spotify(cls, data: Dict[str, Any]) -> "Playlist":
        """Build from a playlist object; ``tracks`` stays None when the payload has no items."""
        tracks = None
        tracks_page = data.get('tracks')
        if isinstance(tracks_page, dict) and 'items' in tracks_page:
            tracks = [
                Track.from_spotify(item['track'])
                for item in tracks_page['items'] or []
                if item.get('track') and item['track'].get('uri')
            ]
        return cls(
            id=data['id'],
            name=data['name'],
            uri=data.get('uri'),
            description=data.get('description'),
            images=[img['url'] for img in data.get('images') or [] if img.get('url')],
            tracks=tracks,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "uri": self.uri,
            "description": self.description,
            "images": list(self.images),
            "tracks": [t.to_json() for t in self.tracks] if self.tracks is not None else None,
        }


@dataclass
class SavedPlaylist:
    """Locally remembered playlist generated by the user."""

    id: str
    spotify_playlist_id: str
    name: str
    country_name: str
    country_flag: str
    genre: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    track_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_playlist(cls, playlist: Playlist, country: Country, genre: str) -> "SavedPlaylist":
        return cls(
            id=str(uuid.uuid4()),
            spotify_playlist_id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            country_name=country.name,
            country_flag=country.flag,
            genre=genre,
            image_url=playlist.images[0] if playlist.images else None,
            track_count=len(playlist.tracks) if playlist.tracks is not None else 0,
        )

    def to_json(self) -> Dict[str, Any]:
        """Serialize to JSON."""
        return {
            "id": self.id,
            "spotifyPlaylistId": self.spotify_playlist_id,
            "name": self.name,
            "description": self.description,
            "countryName": self.country_name,
            "countryFlag": self.country_flag,
            "genre": self.genre,
            "imageUrl": self.image_url,
            "trackCount": self.track_count,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SavedPlaylist":
        """Deserialize from JSON."""
        return cls(
            id=data["id"],
            spotify_playlist_id=data["spotifyPlaylistId"],
            name=data["name"],
            description=data.get("description"),
            country_name=data["countryName"],
            country_flag=data.get("countryFlag", ""),
            genre=data["genre"],
            image_url=data.get("imageUrl"),
            track_count=data.get("trackCount", 0),
            created_at=datetime.fromisoformat(data["createdAt"]),
        )


@dataclass
class PlaybackState:
    """Snapshot of what the user's Spotify device is playing."""

    is_playing: bool = False
    is_paused: bool = True
    track_name: Optional[str] = None
    artist_name: Optional[str] = None
    album_art_url: Optional[str] = None
    track_uri: Optional[str] = None
    duration: float = 0.0
    position: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 0.0
        return self.position / self.duration

    @property
    def formatted_position(self) -> str:
        return _format_time(self.position)

    @property
    def formatted_duration(self) -> str:
        return _format_time(self.duration)

    def to_json(self) -> Dict[str, Any]:
        return {
            "isPlaying": self.is_playing,
            "isPaused": self.is_paused,
            "trackName": self.track_name,
            "artistName": self.artist_name,
            "albumArtUrl": self.album_art_url,
            "trackUri": self.track_uri,
            "duration": self.duration,
            "position": self.position,
            "progress": self.progress,
            "formattedPosition": self.formatted_position,
            "formattedDuration": self.formatted_duration,
        }


def _format_time(seconds: float) -> str:
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"
