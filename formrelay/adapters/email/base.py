from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmailMessage:
    """Plain-text transactional email."""

    from_address: str
    to: list[str] = field(default_factory=list)
    subject: str = ""
    text: str = ""


class AbstractEmailClient(ABC):
    """Interface for transactional email providers."""

    @abstractmethod
    async def send(self, message: EmailMessage) -> str:
        """Send a single email.

        Args:
            message: Email to deliver.

        Returns:
            str: Provider message id.

        Raises:
            EmailDeliveryAppError: If the provider rejects or fails the send.
        """
        ...
