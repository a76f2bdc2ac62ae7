"""
Error handling utility functions.
"""

import logging
from typing import Any, Dict, List, Optional


def create_result_dict(success: bool, errors: Optional[List[str]] = None, **kwargs) -> Dict[str, Any]:
    """
    Create a standardized result dictionary.

    Args:
        success: Whether the step completed without errors
        errors: Error messages collected during the step
        **kwargs: Step-specific counters and details

    Returns:
        Standardized result dictionary
    """
    return {
        "success": success,
        "errors": errors or [],
        **kwargs
    }


def handle_step_error(error_msg: str, errors: List[str], logger: logging.Logger) -> None:
    """
    Log a non-fatal error and keep it for the step result.

    Args:
        error_msg: Error message to log and track
        errors: List to append the error to
        logger: Logger of the module where the step failed
    """
    logger.error(error_msg)
    errors.append(error_msg)
