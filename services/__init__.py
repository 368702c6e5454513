"""Services package."""

from .async_runner import set_main_loop, clear_main_loop, get_main_loop, run_coroutine_sync, submit_coroutine
from .auto_draw import AutoDrawTrigger
from .candidate_service import CandidateService
from .event_clock import EventClock
from .event_service import EventCoordinator, EventStartResult
from .lottery import LotteryEngine
from .lottery_service import LotteryCoordinator
from .queue_ledger import QueueLedger
from .registry import ServiceRegistry
from .session_service import PerformanceService, parse_performance_type
from .weights import WeightCalculator, calculate_weight

__all__ = [
    "set_main_loop",
    "clear_main_loop",
    "get_main_loop",
    "run_coroutine_sync",
    "submit_coroutine",
    "AutoDrawTrigger",
    "CandidateService",
    "EventClock",
    "EventCoordinator",
    "EventStartResult",
    "LotteryEngine",
    "LotteryCoordinator",
    "QueueLedger",
    "ServiceRegistry",
    "PerformanceService",
    "parse_performance_type",
    "WeightCalculator",
    "calculate_weight",
]
