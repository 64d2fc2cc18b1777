"""
Application capabilities: third-party applications deployed for a run.

Deploying applications is owned by the orchestrator; the capabilities here
only make the applications addressable in compositions.
"""

from .base import Capability, Category


class ElggCapability(Capability):
    """Elgg social networking application (blogging, file sharing, groups).

    See http://elgg.org/
    """

    category = Category.APPLICATION

    ARCHIVE_NAME = "elgg-1.8.11.zip"

    def name(self) -> str:
        return "Elgg"

    def is_implemented(self) -> bool:
        return False
