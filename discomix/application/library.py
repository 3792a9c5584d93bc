import logging
from typing import List, Optional

from discomix.domain import catalog
from discomix.domain.entities import Country, Playlist, SavedPlaylist
from discomix.infrastructure.storage import JsonKeyValueStore, StorageError

logger = logging.getLogger(__name__)

STORAGE_KEY = 'saved_playlists'
MAX_SAVED_PLAYLISTS = 50


class PlaylistLibrary:
    """Most-recent-first list of generated playlists, persisted on every change.

    Loaded eagerly; removals and clears are immediate (confirmation is the
    caller's job).
    """

    def __init__(self, store: JsonKeyValueStore, max_items: int = MAX_SAVED_PLAYLISTS):
        self._store = store
        self.max_items = max_items
        self.saved_playlists: List[SavedPlaylist] = []
        self._load()

    def _load(self) -> None:
        try:
            raw = self._store.get(STORAGE_KEY)
            if raw is None:
                logger.info("No saved playlists found")
                return
            self.saved_playlists = [SavedPlaylist.from_json(item) for item in raw]
            logger.info(f"Loaded {len(self.saved_playlists)} saved playlists")
        except (StorageError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to load playlists: {e}")
            self.saved_playlists = []

    def _persist(self) -> None:
        self._store.set(STORAGE_KEY, [p.to_json() for p in self.saved_playlists])
        logger.debug(f"Persisted {len(self.saved_playlists)} playlists")

    def save(self, playlist: Playlist, country: Country, genre: str) -> SavedPlaylist:
        """Remember a newly generated playlist; the oldest entries beyond the cap are dropped."""
        saved = SavedPlaylist.from_playlist(playlist, country, genre)
        self.saved_playlists.insert(0, saved)
        del self.saved_playlists[self.max_items:]
        self._persist()
        logger.info(f"Saved playlist: {saved.name}")
        return saved

    def get(self, playlist_id: str) -> Optional[SavedPlaylist]:
        return next((p for p in self.saved_playlists if p.id == playlist_id), None)

    def remove(self, playlist_id: str) -> bool:
        """Remove by local id. Returns False (and writes nothing) when it is not there."""
        remaining = [p for p in self.saved_playlists if p.id != playlist_id]
        if len(remaining) == len(self.saved_playlists):
            return False
        self.saved_playlists = remaining
        self._persist()
        logger.info(f"Removed playlist: {playlist_id}")
        return True

    def clear_all(self) -> None:
        self.saved_playlists = []
        self._persist()
        logger.info("Cleared all saved playlists")

    def is_saved(self, spotify_id: str) -> bool:
        return any(p.spotify_playlist_id == spotify_id for p in self.saved_playlists)

    def for_country(self, text: str) -> List[SavedPlaylist]:
        needle = text.casefold()
        return [p for p in self.saved_playlists if needle in p.country_name.casefold()]

    def for_genre(self, text: str) -> List[SavedPlaylist]:
        needle = text.casefold()
        return [p for p in self.saved_playlists if needle in p.genre.casefold()]

    def search(self, text: str) -> List[SavedPlaylist]:
        """Case-insensitive match on name, country or genre. Empty text returns everything."""
        if not text:
            return list(self.saved_playlists)
        needle = text.casefold()
        return [
            p for p in self.saved_playlists
            if needle in p.name.casefold()
            or needle in p.country_name.casefold()
            or needle in p.genre.casefold()
        ]

    def sorted_by_date(self) -> List[SavedPlaylist]:
        return sorted(self.saved_playlists, key=lambda p: p.created_at, reverse=True)

    @property
    def total_count(self) -> int:
        return len(self.saved_playlists)

    @property
    def unique_countries(self) -> List[str]:
        return sorted({p.country_name for p in self.saved_playlists})

    @property
    def unique_genres(self) -> List[str]:
        return sorted({p.genre for p in self.saved_playlists})

    def country_for(self, saved: SavedPlaylist) -> Optional[Country]:
        """Catalog country for a saved entry; None when the name no longer matches."""
        return catalog.find_country(saved.country_name)
