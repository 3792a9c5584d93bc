class NotAuthenticated(Exception):
    """User has not connected a Spotify account."""


class NoAccessToken(Exception):
    """No Spotify access token is available for an authenticated request."""


class InvalidURL(Exception):
    """A request URL could not be built from the given parts."""


class BadResponse(Exception):
    """Remote API answered with a non-2xx status. Carries status code and body text."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message


class NoTracksFound(Exception):
    """Playlist generation collected no track URIs."""

    def __init__(self, message: str = "No tracks found for the given artists") -> None:
        super().__init__(message)


class DecodeFailure(Exception):
    """Remote payload did not have the expected shape."""


class ArtistDiscoveryError(Exception):
    """Artist lookup failed (network, status or decode)."""


class PlayerUnavailable(Exception):
    """No Spotify device could be reached for playback control."""


class CountryNotFound(LookupError):
    """Country name is not in the catalog."""
