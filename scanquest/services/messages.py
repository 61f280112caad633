"""
Locale catalog for player-facing names and admin log messages
"""
from typing import Dict


CATALOG: Dict[str, Dict[str, str]] = {
    "en": {
        "team_name": "Team {n}",
        "event_suffix": " (event: {event})",
        "join": "Device joined {team}{event}.",
        "answer": "{team} answered \"{task}\" {verdict} and got {points} points{event}.",
        "correct": "correctly",
        "incorrect": "incorrectly",
        "bonus": "{by} gave {points} bonus points to {team}.",
        "unknown": "Unknown event.",
    },
    "da": {
        "team_name": "Hold {n}",
        "event_suffix": " (event: {event})",
        "join": "Enhed tilføjet til {team}{event}.",
        "answer": "{team} svarede på \"{task}\" {verdict} og fik {points} point{event}.",
        "correct": "rigtigt",
        "incorrect": "forkert",
        "bonus": "{by} gav {points} bonuspoint til {team}.",
        "unknown": "Ukendt hændelse.",
    },
}

DEFAULT_LOCALE = "en"


def catalog(locale: str) -> Dict[str, str]:
    """Messages for locale, English when unknown"""
    return CATALOG.get(locale, CATALOG[DEFAULT_LOCALE])
