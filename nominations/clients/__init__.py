from nominations.clients.base import BaseClient
from nominations.clients.feedback import FeedbackClient
from nominations.clients.trades import TradeDirectoryClient

__all__ = ["BaseClient", "FeedbackClient", "TradeDirectoryClient"]
