"""Core application components."""

# Import in correct order to avoid circular dependencies
from core.logger import setup_logger, get_logger
from core.constants import (
    DatabaseDefaults,
    LotteryDefaults,
    EventDefaults,
    AutoDrawDefaults,
    CandidateLimits,
    DrawAlgorithm,
    EventState,
    TimetableEntryStatus,
    PerformanceType,
)
from core.exceptions import (
    ApplicationError,
    ConfigurationError,
    DatabaseError,
    ValidationError,
    NotFoundError,
    ServiceError,
    LotteryError,
    QueueError,
    EventError,
    PerformanceError,
)

__all__ = [
    # Initializer
    'ApplicationInitializer',
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'DatabaseDefaults',
    'LotteryDefaults',
    'EventDefaults',
    'AutoDrawDefaults',
    'CandidateLimits',
    'DrawAlgorithm',
    'EventState',
    'TimetableEntryStatus',
    'PerformanceType',
    # Exceptions
    'ApplicationError',
    'ConfigurationError',
    'DatabaseError',
    'ValidationError',
    'NotFoundError',
    'ServiceError',
    'LotteryError',
    'QueueError',
    'EventError',
    'PerformanceError',
]


def __getattr__(name: str):
    # ApplicationInitializer pulls in the web stack; load it on first use
    if name == "ApplicationInitializer":
        from core.app_initializer import ApplicationInitializer
        return ApplicationInitializer
    raise AttributeError(f"module 'core' has no attribute {name!r}")
