"""Contains the dataclasses used in the Notifier."""

__all__ = ["NotifierConfig"]

from dataclasses import dataclass


@dataclass
class NotifierConfig:
    """Represents the configuration of the Notifier."""

    hub_callback: str
    """The externally reachable base URL the hub sends requests to"""

    secret: str | None = None
    """The secret shared with the hub to sign notifications"""

    middleware: bool = False
    """Whether the endpoint is mounted into an app owned by the caller"""

    port: int = 8000
    """The port to run the standalone server on"""

    path: str = "/"
    """The path of the callback endpoint"""

    hub_url: str = "https://pubsubhubbub.appspot.com/"
    """The URL of the WebSub hub"""

    host: str = "0.0.0.0"  # noqa: S104
    """The host to run the standalone server on"""

    ledger_capacity: int = 50
    """The number of recent video IDs remembered to suppress duplicates"""

    def __post_init__(self) -> None:
        """Normalize the endpoint path."""
        if not self.path.startswith("/"):
            self.path = f"/{self.path}"

    @property
    def callback_url(self) -> str:
        """Get the URL the hub sends verification requests and notifications to.

        :return: The callback URL.
        """
        return f"{self.hub_callback.rstrip('/')}{self.path}"
