"""Static Route 66 heritage ratings and lookups."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from ...models.domain import HeritageScore, TripStop

HERITAGE_TIERS = ("iconic", "major", "significant", "notable", "standard")
DEFAULT_HERITAGE_SCORE = HeritageScore(score=25, tier="standard", reasons=())
HIGH_HERITAGE_THRESHOLD = 85


@dataclass(frozen=True, slots=True)
class HeritageCity:
    name: str
    state: str
    score: int
    tier: str
    reasons: tuple[str, ...]


HERITAGE_CITIES: tuple[HeritageCity, ...] = (
    HeritageCity("Chicago", "Illinois", 100, "iconic", ("Eastern terminus of Route 66", "Grant Park starting point")),
    HeritageCity("Santa Monica", "California", 100, "iconic", ("Western terminus of Route 66", "End of the Trail sign")),
    HeritageCity("St. Louis", "Missouri", 95, "iconic", ("Gateway to the West", "Chain of Rocks Bridge")),
    HeritageCity("Tulsa", "Oklahoma", 90, "iconic", ("Route 66 museums", "Cyrus Avery connection")),
    HeritageCity("Oklahoma City", "Oklahoma", 85, "major", ("Route 66 Museum", "Stockyards heritage")),
    HeritageCity("Amarillo", "Texas", 85, "major", ("Cadillac Ranch", "Route 66 Historic District")),
    HeritageCity("Albuquerque", "New Mexico", 80, "major", ("Old Town heritage", "Route 66 Central Avenue")),
    HeritageCity("Flagstaff", "Arizona", 80, "major", ("Gateway to Grand Canyon", "Historic downtown")),
    HeritageCity("Springfield", "Illinois", 75, "major", ("State capital", "Abraham Lincoln heritage")),
    HeritageCity("Springfield", "Missouri", 72, "significant", ("Birthplace of Route 66",)),
    HeritageCity("Joplin", "Missouri", 70, "significant", ("Mining town heritage", "Route 66 crossroads")),
    HeritageCity("Gallup", "New Mexico", 70, "significant", ("Trading post heritage", "Route 66 gateway")),
    HeritageCity("Kingman", "Arizona", 70, "significant", ("Route 66 Museum", "Desert heritage")),
    HeritageCity("Williams", "Arizona", 65, "significant", ("Last Route 66 town bypassed", "Historic railroad")),
    HeritageCity("Tucumcari", "New Mexico", 65, "significant", ("Route 66 Tonight slogan", "Vintage neon signs")),
    HeritageCity("Santa Fe", "New Mexico", 60, "significant", ("State capital", "Historic plaza")),
    HeritageCity("Barstow", "California", 58, "notable", ("Route 66 Mother Road Museum", "Harvey House depot")),
    HeritageCity("Winslow", "Arizona", 55, "notable", ("Standin' on the Corner park", "La Posada hotel")),
    HeritageCity("Seligman", "Arizona", 55, "notable", ("Birthplace of Historic Route 66 revival",)),
    HeritageCity("Holbrook", "Arizona", 50, "notable", ("Wigwam Motel", "Petrified Forest gateway")),
    HeritageCity("Shamrock", "Texas", 50, "notable", ("U-Drop Inn",)),
    HeritageCity("Pontiac", "Illinois", 48, "notable", ("Route 66 Hall of Fame",)),
    HeritageCity("Needles", "California", 45, "notable", ("Colorado River crossing",)),
)

_STATE_ABBREVIATIONS = MappingProxyType(
    {
        "il": "illinois",
        "mo": "missouri",
        "ks": "kansas",
        "ok": "oklahoma",
        "tx": "texas",
        "nm": "new mexico",
        "az": "arizona",
        "ca": "california",
    }
)


def normalize_city_name(value: str | None) -> str:
    """Lower-case a city name, drop any ", ST" suffix and spell "saint" as "st."."""
    if not value:
        return ""
    name = value.split(",")[0].strip().lower()
    name = re.sub(r"^(saint|st)\.?\s+", "st. ", name)
    return re.sub(r"\s+", " ", name)


def normalize_state(value: str | None) -> str:
    if not value:
        return ""
    state = value.strip().lower()
    return _STATE_ABBREVIATIONS.get(state, state)


def _state_from_name(value: str | None) -> str:
    if not value or "," not in value:
        return ""
    return normalize_state(value.split(",", 1)[1])


def _build_index(cities: Iterable[HeritageCity]) -> Mapping[str, tuple[HeritageCity, ...]]:
    index: dict[str, list[HeritageCity]] = {}
    for city in cities:
        index.setdefault(normalize_city_name(city.name), []).append(city)
    return MappingProxyType({key: tuple(value) for key, value in index.items()})


HERITAGE_INDEX = _build_index(HERITAGE_CITIES)


def lookup_heritage_city(stop: TripStop) -> HeritageCity | None:
    state = normalize_state(stop.state) or _state_from_name(stop.name) or _state_from_name(stop.city_name)
    for raw_name in (stop.city_name, stop.name):
        matches = HERITAGE_INDEX.get(normalize_city_name(raw_name))
        if not matches:
            continue
        if state:
            for city in matches:
                if normalize_state(city.state) == state:
                    return city
            continue
        return matches[0]
    return None


def calculate_heritage_score(stop: TripStop) -> HeritageScore:
    city = lookup_heritage_city(stop)
    if city is None:
        return DEFAULT_HERITAGE_SCORE
    return HeritageScore(score=city.score, tier=city.tier, reasons=city.reasons)


def heritage_statistics(stops: Sequence[TripStop]) -> dict:
    """Summarize heritage coverage of a selection."""
    scores = [(stop, calculate_heritage_score(stop)) for stop in stops]
    distribution = {tier: 0 for tier in HERITAGE_TIERS}
    for _, score in scores:
        distribution[score.tier] += 1
    average = sum(score.score for _, score in scores) / len(scores) if scores else 0.0
    top = sorted(scores, key=lambda item: item[1].score, reverse=True)
    return {
        "average_heritage_score": average,
        "tier_distribution": distribution,
        "high_heritage_count": sum(1 for _, score in scores if score.score >= HIGH_HERITAGE_THRESHOLD),
        "top_heritage_cities": [stop.name for stop, score in top[:5] if score.tier != "standard"],
    }
