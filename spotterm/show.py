"""Podcast shows."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from spotterm.episode import Episode

EpisodeFetcher = Callable[[str], Iterable[Episode]]


@dataclass
class Show:
    """A podcast show; ``episodes`` stays ``None`` until they are loaded."""

    id: str
    uri: str
    name: str
    publisher: str
    description: str
    cover_url: str | None = None
    episodes: list[Episode] | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Show":
        """Build a show from a web API show object."""
        images = data.get("images") or []
        return cls(
            id=data["id"],
            uri=data["uri"],
            name=data["name"],
            publisher=data["publisher"],
            description=data["description"],
            cover_url=images[0]["url"] if images else None,
        )

    def load_all_episodes(self, fetch_episodes: EpisodeFetcher) -> None:
        """Fetch every episode of the show once, by calling ``fetch_episodes(id)``."""
        if self.episodes is not None:
            return
        self.episodes = list(fetch_episodes(self.id))

    def __str__(self) -> str:
        return f"{self.publisher} - {self.name}"

    def display_left(self) -> str:
        return str(self)

    def share_url(self) -> str:
        return f"https://open.spotify.com/show/{self.id}"

    def play(self, queue: Any, fetch_episodes: EpisodeFetcher) -> None:
        """Queue all episodes after the current item and start playing them."""
        self.load_all_episodes(fetch_episodes)
        index = queue.append_next(self.episodes or [])
        queue.play(index, True, True)

    def play_next(self, queue: Any, fetch_episodes: EpisodeFetcher) -> None:
        """Insert all episodes, in order, right after the current item."""
        self.load_all_episodes(fetch_episodes)
        for episode in reversed(self.episodes or []):
            queue.insert_after_current(episode)

    def queue(self, queue: Any, fetch_episodes: EpisodeFetcher) -> None:
        """Append all episodes to the end of the queue."""
        self.load_all_episodes(fetch_episodes)
        for episode in self.episodes or []:
            queue.append(episode)