"""
Trigger Client module.

Thin GitLab REST client covering the four calls the trigger flow makes,
plus one exception type per failure kind.
"""

from .client import (
    GitLabClient,
    GitLabError,
    GitLabHTTPError,
    GitLabResponseError,
    GitLabTransportError,
)

__all__ = [
    "GitLabClient",
    "GitLabError",
    "GitLabHTTPError",
    "GitLabResponseError",
    "GitLabTransportError",
]
