"""
Per-entity document schemas.

Backend documents carry no schema enforcement, so every document is parsed
here on its way in from a subscription. Missing optional fields get their
defaults; values of the wrong type raise SchemaError.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from league_hub.errors import SchemaError

CONSTITUTION_PLACEHOLDER = 'No constitution found. Click "Edit" to add one!'


def _as_int(data: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = data.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise SchemaError(f"'{key}' must be a number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SchemaError(f"'{key}' must be a number, got {value!r}")


def _as_text(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise SchemaError(f"'{key}' must be text, got {type(value).__name__}")
    return value


def _as_bool(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise SchemaError(f"'{key}' must be true or false, got {value!r}")
    return value


def _as_timestamp(data: Mapping[str, Any], key: str) -> Optional[datetime]:
    value = data.get(key)
    if value is None or isinstance(value, datetime):
        return value
    raise SchemaError(f"'{key}' must be a timestamp, got {type(value).__name__}")


@dataclass(frozen=True)
class NewsItem:
    id: str
    title: str
    content: str
    created_at: Optional[datetime]
    author_id: Optional[str]

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "NewsItem":
        return cls(
            id=doc_id,
            title=_as_text(data, 'title'),
            content=_as_text(data, 'content'),
            created_at=_as_timestamp(data, 'timestamp'),
            author_id=data.get('authorId')
        )


@dataclass(frozen=True)
class TeamRecord:
    name: str
    manager: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    championship: bool = False

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "TeamRecord":
        if not isinstance(data, Mapping):
            raise SchemaError(f"team entry must be an object, got {type(data).__name__}")
        return cls(
            name=_as_text(data, 'name', 'Unknown'),
            manager=_as_text(data, 'manager'),
            wins=_as_int(data, 'wins'),
            losses=_as_int(data, 'losses'),
            ties=_as_int(data, 'ties'),
            championship=_as_bool(data, 'championship')
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'manager': self.manager,
            'wins': self.wins,
            'losses': self.losses,
            'ties': self.ties,
            'championship': self.championship
        }


@dataclass(frozen=True)
class HistoricalSeason:
    id: str
    year: int
    standings: List[TeamRecord] = field(default_factory=list)
    championship_team: Optional[str] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "HistoricalSeason":
        if 'year' not in data:
            raise SchemaError(f"season {doc_id} has no 'year'")

        raw_standings = data.get('standings') or []
        if not isinstance(raw_standings, list):
            raise SchemaError(f"season {doc_id}: 'standings' must be a list")

        champion = data.get('championshipTeam') or None
        return cls(
            id=doc_id,
            year=_as_int(data, 'year'),
            standings=[TeamRecord.from_document(team) for team in raw_standings],
            championship_team=str(champion) if champion is not None else None
        )

    def to_document(self) -> Dict[str, Any]:
        doc = {
            'year': self.year,
            'standings': [team.to_document() for team in self.standings]
        }
        if self.championship_team:
            doc['championshipTeam'] = self.championship_team
        return doc


@dataclass(frozen=True)
class ConstitutionDocument:
    content: str
    last_updated: Optional[datetime] = None
    updated_by: Optional[str] = None

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "ConstitutionDocument":
        return cls(
            content=_as_text(data, 'content'),
            last_updated=_as_timestamp(data, 'lastUpdated'),
            updated_by=data.get('updatedBy')
        )


def display_constitution(document: Optional[ConstitutionDocument]) -> str:
    """Text shown for the constitution, falling back to the placeholder when absent"""
    if document is None:
        return CONSTITUTION_PLACEHOLDER
    return document.content
