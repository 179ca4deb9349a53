"""
Utilities Package

Shared helper functions used across the application.
"""

from app.utils.helpers import (
    get_json_body,
    no_content,
)

__all__ = [
    'get_json_body',
    'no_content',
]
