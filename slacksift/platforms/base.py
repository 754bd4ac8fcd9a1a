"""Abstract base class for messaging platforms."""

from abc import ABC, abstractmethod

from slacksift.core.schemas import SearchCriteria, SlackDeleteResponse, SlackSearchResponse


class MessagingPlatform(ABC):
    """Base class that every messaging platform client must implement."""

    @property
    @abstractmethod
    def platform_id(self) -> str:
        """Unique identifier for this platform (e.g. 'slack')."""

    @abstractmethod
    async def validate_token(self) -> bool:
        """Return True if the configured token is accepted. Never raises."""

    @abstractmethod
    async def search_messages(self, criteria: SearchCriteria) -> SlackSearchResponse:
        """Run one search and return the raw (unscored) matches."""

    @abstractmethod
    async def delete_message(self, permalink: str) -> SlackDeleteResponse:
        """Delete the message identified by ``permalink``."""
