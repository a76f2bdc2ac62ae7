"""
Logging utility functions for handling Unicode encoding issues.
"""


def safe_log_text(text: str) -> str:
    """
    Convert video and channel titles to ASCII-safe text for logging.

    Titles come straight from the search API and may contain characters
    the console encoding cannot represent.
    """
    if text:
        return text.encode('ascii', 'replace').decode('ascii')
    return text
