"""Podcast episodes."""

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class Episode:
    """A single podcast episode; ``duration`` is in milliseconds."""

    id: str
    uri: str
    duration: int
    name: str
    description: str
    release_date: str
    cover_url: str | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Episode":
        """Build an episode from a web API episode object."""
        images = data.get("images") or []
        return cls(
            id=data["id"],
            uri=data["uri"],
            duration=data["duration_ms"],
            name=data["name"],
            description=data["description"],
            release_date=data["release_date"],
            cover_url=images[0]["url"] if images else None,
        )

    def duration_str(self) -> str:
        minutes = self.duration // 60_000
        seconds = (self.duration // 1000) % 60
        return f"{minutes:02}:{seconds:02}"

    def display_left(self) -> str:
        return self.name

    def display_right(self) -> str:
        return f"{self.duration_str()} [{self.release_date}]"

    def share_url(self) -> str:
        return f"https://open.spotify.com/episode/{self.id}"

    def __str__(self) -> str:
        return self.name