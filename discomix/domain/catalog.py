from typing import List, Optional

from .entities import Country


def _country(id, name, capital, latitude, longitude, population, flag, region, currency, genres):
    return Country(
        id=id,
        name=name,
        capital=capital,
        latitude=latitude,
        longitude=longitude,
        population=population,
        flag=flag,
        region=region,
        currency=currency,
        genres=tuple(genres),
    )


COUNTRIES: List[Country] = [
    _country("us", "United States", "Washington, D.C.", 38.9072, -77.0369, 331002651, "🇺🇸", "North America", "USD", ["Jazz", "Hip Hop", "Country"]),
    _country("gb", "United Kingdom", "London", 51.5074, -0.1278, 67886011, "🇬🇧", "Europe", "GBP", ["Rock", "Electronic", "Punk"]),
    _country("fr", "France", "Paris", 48.8566, 2.3522, 65273511, "🇫🇷", "Europe", "EUR", ["Chanson", "Electronic", "Pop"]),
    _country("de", "Germany", "Berlin", 52.5200, 13.4050, 83783942, "🇩🇪", "Europe", "EUR", ["Electronic", "Industrial", "Techno"]),
    _country("jp", "Japan", "Tokyo", 35.6762, 139.6503, 126476461, "🇯🇵", "Asia", "JPY", ["J-Pop", "Enka", "City Pop"]),
    _country("cn", "China", "Beijing", 39.9042, 116.4074, 1439323776, "🇨🇳", "Asia", "CNY", ["C-Pop", "Folk", "Opera"]),
    _country("in", "India", "New Delhi", 28.6139, 77.2090, 1380004385, "🇮🇳", "Asia", "INR", ["Bollywood", "Classical", "Bhangra"]),
    _country("br", "Brazil", "Brasília", -15.8267, -47.9218, 212559417, "🇧🇷", "South America", "BRL", ["Samba", "Bossa Nova", "Forró"]),
    _country("au", "Australia", "Canberra", -35.2809, 149.1300, 25499884, "🇦🇺", "Oceania", "AUD", ["Rock", "Indie", "Folk"]),
    _country("ca", "Canada", "Ottawa", 45.4215, -75.6972, 37742154, "🇨🇦", "North America", "CAD", ["Indie", "Folk", "Hip Hop"]),
    _country("ru", "Russia", "Moscow", 55.7558, 37.6173, 145934462, "🇷🇺", "Europe/Asia", "RUB", ["Classical", "Folk", "Pop"]),
    _country("za", "South Africa", "Pretoria", -25.7479, 28.2293, 59308690, "🇿🇦", "Africa", "ZAR", ["Amapiano", "Kwaito", "Jazz"]),
    _country("eg", "Egypt", "Cairo", 30.0444, 31.2357, 102334404, "🇪🇬", "Africa", "EGP", ["Shaabi", "Classical", "Pop"]),
    _country("mx", "Mexico", "Mexico City", 19.4326, -99.1332, 128932753, "🇲🇽", "North America", "MXN", ["Mariachi", "Ranchera", "Regional Mexican"]),
    _country("it", "Italy", "Rome", 41.9028, 12.4964, 60461826, "🇮🇹", "Europe", "EUR", ["Opera", "Pop", "Folk"]),
    _country("es", "Spain", "Madrid", 40.4168, -3.7038, 46754778, "🇪🇸", "Europe", "EUR", ["Flamenco", "Latin Pop", "Reggaeton"]),
    _country("ar", "Argentina", "Buenos Aires", -34.6037, -58.3816, 45195774, "🇦🇷", "South America", "ARS", ["Tango", "Folk", "Rock"]),
    _country("kr", "South Korea", "Seoul", 37.5665, 126.9780, 51269185, "🇰🇷", "Asia", "KRW", ["K-Pop", "Trot", "Hip Hop"]),
    _country("tr", "Turkey", "Ankara", 39.9334, 32.8597, 84339067, "🇹🇷", "Europe/Asia", "TRY", ["Arabesque", "Folk", "Pop"]),
    _country("sa", "Saudi Arabia", "Riyadh", 24.7136, 46.6753, 34813871, "🇸🇦", "Asia", "SAR", ["Arabic Pop", "Traditional", "Khaleeji"]),
]

_BY_NAME = {c.name: c for c in COUNTRIES}
_BY_ID = {c.id: c for c in COUNTRIES}


def all_countries() -> List[Country]:
    return list(COUNTRIES)


def find_country(name: str) -> Optional[Country]:
    """Exact-name lookup. Unknown names return None."""
    return _BY_NAME.get(name)


def find_country_by_id(country_id: str) -> Optional[Country]:
    return _BY_ID.get(country_id)


def all_genres() -> List[str]:
    """Every genre in the catalog, sorted, without repeats."""
    return sorted({genre for country in COUNTRIES for genre in country.genres})
