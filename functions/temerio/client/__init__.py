"""
Client helpers for the Temerio service.
"""

from temerio.client.activity import ActivityLogger, ApiActivitySink, DbActivitySink
from temerio.client.api import ApiResponse, TemerioApiClient, api_call
from temerio.client.checkout import start_checkout
from temerio.client.config import ClientConfig, UserSession
from temerio.client.notify import LoggingNotifier, RecordingNotifier
from temerio.client.seeding import run_first_run_seed
from temerio.client.subscription import SubscriptionMonitor, SubscriptionState

__all__ = [
    "ActivityLogger",
    "ApiActivitySink",
    "ApiResponse",
    "ClientConfig",
    "DbActivitySink",
    "LoggingNotifier",
    "RecordingNotifier",
    "SubscriptionMonitor",
    "SubscriptionState",
    "TemerioApiClient",
    "UserSession",
    "api_call",
    "run_first_run_seed",
    "start_checkout",
]
