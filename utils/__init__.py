"""
Utility functions for the YouTube announcement bot.
"""

from .logging_utils import safe_log_text
from .error_utils import create_result_dict, handle_step_error
from .rate_limiter import RateLimiter
from .time_utils import utc_now

__all__ = ["safe_log_text", "create_result_dict", "handle_step_error", "RateLimiter", "utc_now"]
