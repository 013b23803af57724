"""
Collaborator Interfaces - Abstract bases for the services around the engine.

The engine reads actors from an ActorRepository and weight profiles from a
WeightProfileStore, and hands its results to a PersistenceSink. It never
writes to storage itself.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from matchmaking.models import ActorProfile
    from matchmaking.profiles.models import WeightProfile
    from matchmaking.scorer.models import MatchResult


class ActorRepository(ABC):
    """Read-only source of actor profiles."""

    @abstractmethod
    def get(self, actor_id: str) -> "ActorProfile":
        """
        Return the actor with the given id.

        Raises:
            ActorNotFound: if no actor has this id
        """
        pass

    @abstractmethod
    def list_all(self) -> List["ActorProfile"]:
        """Return every actor known to the repository."""
        pass


class WeightProfileStore(ABC):
    """Lookup of named weight profiles."""

    @abstractmethod
    def get(self, name: str) -> "WeightProfile":
        """
        Return the profile with the given name.

        Raises:
            WeightProfileNotFound: if no profile has this name
        """
        pass

    @abstractmethod
    def list(self) -> List["WeightProfile"]:
        pass


class PersistenceSink(ABC):
    """Receiver for match results produced by the engine."""

    @abstractmethod
    def save_matches(self, results: List["MatchResult"], profile_name: str) -> int:
        """
        Store results computed with the named profile.

        Returns:
            Number of results accepted
        """
        pass


class InMemoryActorRepository(ActorRepository):
    """Dictionary-backed repository, for wiring and tests."""

    def __init__(self, actors: Optional[Iterable["ActorProfile"]] = None):
        self._actors: Dict[str, "ActorProfile"] = {}
        for actor in actors or []:
            self.put(actor)

    def put(self, actor: "ActorProfile") -> None:
        self._actors[actor.id] = actor

    def get(self, actor_id: str) -> "ActorProfile":
        from matchmaking.exceptions import ActorNotFound

        try:
            return self._actors[actor_id]
        except KeyError:
            raise ActorNotFound(actor_id) from None

    def list_all(self) -> List["ActorProfile"]:
        return list(self._actors.values())


class InMemoryMatchSink(PersistenceSink):
    """Collects saved results in memory, keyed by profile name."""

    def __init__(self):
        self.saved: Dict[str, List["MatchResult"]] = {}

    def save_matches(self, results: List["MatchResult"], profile_name: str) -> int:
        self.saved.setdefault(profile_name, []).extend(results)
        return len(results)
