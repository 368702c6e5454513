"""Application-wide exception classes."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""
    pass


class DatabaseError(ApplicationError):
    """Base exception for database-related errors."""
    pass


class ConnectionPoolError(DatabaseError):
    """Raised when database connection pool has issues."""
    pass


class ValidationError(ApplicationError):
    """Raised when data validation fails."""
    pass


class NotFoundError(ApplicationError):
    """Raised when a requested entity does not exist."""
    pass


class CandidateNotFoundError(NotFoundError):
    """Raised when a DJ id is unknown."""
    pass


class PerformanceNotFoundError(NotFoundError):
    """Raised when a performance id is unknown."""
    pass


class ServiceError(ApplicationError):
    """Base exception for service-level errors."""
    pass


class LotteryError(ServiceError):
    """Base exception for lottery operations."""
    pass


class EmptyCandidatePoolError(LotteryError):
    """Raised when weights are requested for an empty pool."""
    pass


class InvalidWeightError(LotteryError):
    """Raised when a computed weight is not a positive number."""
    pass


class QueueError(ServiceError):
    """Base exception for queue ledger operations."""
    pass


class AlreadyQueuedError(QueueError):
    """Raised when inserting a DJ that already holds a position."""
    pass


class NotQueuedError(QueueError):
    """Raised when moving a DJ that holds no position."""
    pass


class PositionOutOfRangeError(QueueError):
    """Raised when a target position is outside 1..N."""
    pass


class InactiveCandidateError(QueueError):
    """Raised when queueing a DJ that is not active."""
    pass


class EventError(ServiceError):
    """Base exception for event session operations."""
    pass


class EventAlreadyActiveError(EventError):
    """Raised when starting an event while another one is running."""
    pass


class NoActiveEventError(EventError):
    """Raised when an operation needs a running event and there is none."""
    pass


class PerformanceError(ServiceError):
    """Base exception for performance (DJ set) operations."""
    pass


class PerformanceAlreadyActiveError(PerformanceError):
    """Raised when a DJ already has an open performance."""
    pass


class PerformanceAlreadyEndedError(PerformanceError):
    """Raised when ending a performance twice."""
    pass
