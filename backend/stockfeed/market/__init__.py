"""Market quote feed subsystem.

Public API:
    Quote, Command, OutboundMessage - Wire-level data models
    QuoteGenerator      - Random-walk price model keyed by symbol
    CurrencyConverter   - Currency validation and best-effort conversion
    SubscriptionRegistry - Thread-safe, persisted subscription set
    CommandDispatcher   - Routes inbound commands to their effects
    Broadcaster         - Periodic sweep over all subscriptions
    QuoteService        - Owns both loops and cooperative shutdown
    create_quote_service - Factory that assembles the service from env vars
    create_stream_router - FastAPI router factory for commands and SSE
"""

from .broadcaster import Broadcaster
from .currency import CurrencyConverter
from .dispatcher import CommandDispatcher
from .factory import create_quote_service
from .generator import QuoteGenerator
from .models import Command, CommandKind, MessageKind, OutboundMessage, PricePoint, Quote
from .registry import SubscriptionRegistry
from .service import QuoteService
from .stream import create_stream_router
from .transport import QueueTransport

__all__ = [
    "Quote",
    "PricePoint",
    "Command",
    "CommandKind",
    "MessageKind",
    "OutboundMessage",
    "QuoteGenerator",
    "CurrencyConverter",
    "SubscriptionRegistry",
    "CommandDispatcher",
    "Broadcaster",
    "QuoteService",
    "QueueTransport",
    "create_quote_service",
    "create_stream_router",
]
