import os
import sys
import pytest


def _ensure_project_root_on_sys_path() -> None:
    here = os.path.dirname(__file__)
    project_root = os.path.abspath(os.path.join(here, "..", ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_sys_path()


@pytest.fixture(autouse=True)
def _clear_discomix_env():
    """Keep Spotify credentials and DiscoMix tunables from leaking into tests.
    A developer shell or loaded .env may set these; clear them before each test
    and restore afterwards so tests that set them stay deterministic.
    """
    keys = [
        'SPOTIFY_CLIENT_ID', 'SPOTIFY_CLIENT_SECRET', 'SPOTIFY_REDIRECT_URI',
        'DISCOMIX_CONFIG_DIR', 'DISCOMIX_TRACKS_PER_ARTIST', 'DISCOMIX_ARTIST_LIMIT',
        'DISCOMIX_MUSICBRAINZ_URL_RELS', 'MUSICBRAINZ_USER_AGENT',
    ]
    backup = {k: os.environ.get(k) for k in keys}
    for k in keys:
        os.environ.pop(k, None)
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v
