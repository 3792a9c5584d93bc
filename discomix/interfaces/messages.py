from discomix.crosscutting.config import ConfigError
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


def user_message(error: Exception) -> str:
    """Text shown to the user for a failure raised below the interface layer."""
    if isinstance(error, (NoAccessToken, NotAuthenticated)):
        return "Please connect your Spotify account first."
    if isinstance(error, BadResponse):
        if error.status == 401:
            return "Your Spotify session has expired. Please reconnect."
        if error.status == 404:
            return "This playlist no longer exists on Spotify."
        return f"Spotify request failed: {error.message}"
    if isinstance(error, NoTracksFound):
        return "No tracks found for these artists. Try a different genre."
    if isinstance(error, (ArtistDiscoveryError, CountryNotFound, InvalidURL, PlayerUnavailable, ConfigError)):
        return str(error)
    if isinstance(error, DecodeFailure):
        return "Spotify returned data we could not read."
    return f"Unexpected error: {error}"


def http_status_for(error: Exception) -> int:
    if isinstance(error, (NoAccessToken, NotAuthenticated)):
        return 401
    if isinstance(error, BadResponse):
        return error.status if error.status in (401, 403, 404, 429) else 502
    if isinstance(error, CountryNotFound):
        return 404
    if isinstance(error, InvalidURL):
        return 400
    if isinstance(error, NoTracksFound):
        return 422
    if isinstance(error, (ArtistDiscoveryError, DecodeFailure)):
        return 502
    if isinstance(error, PlayerUnavailable):
        return 409
    return 500
