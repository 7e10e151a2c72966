"""Badge evaluator collaborator.

Called after a purchase commits. Implementations may raise; the caller runs
them as detached tasks, so a failure is logged and never reaches the buyer.
"""

import logging
from typing import Protocol

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)


class BadgeEvaluator(Protocol):
    async def evaluate_and_award(self, user_id: str) -> None: ...


class NoopBadgeEvaluator:
    """Used when no badge service is configured."""

    async def evaluate_and_award(self, user_id: str) -> None:
        logger.debug("Badge evaluation skipped (no service configured): user=%s", user_id)


class HttpBadgeEvaluator:
    """Asks the badge service to evaluate and award badges for a user.

    Raises:
        httpx.HTTPError: If the request fails or the service answers non-2xx
    """

    def __init__(self, base_url: str, timeout: float = 5.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def evaluate_and_award(self, user_id: str) -> None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/badges/evaluate",
                json={"user_id": user_id},
            )
            response.raise_for_status()
        logger.debug("Badge evaluation requested: user=%s", user_id)


def build_badge_evaluator() -> BadgeEvaluator:
    if settings.BADGE_SERVICE_URL:
        return HttpBadgeEvaluator(
            settings.BADGE_SERVICE_URL, timeout=settings.BADGE_TIMEOUT_SECONDS
        )
    return NoopBadgeEvaluator()
