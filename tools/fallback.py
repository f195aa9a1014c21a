"""Ordered model-tier fallback.

Each ``Strategy`` is one attempt against one model tier. ``first_success``
tries them in order and returns an ``Outcome`` instead of raising, so callers
branch on a value rather than on exceptions.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from config.exceptions import CredentialError, DreamLinesError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[T]):
    tier: str
    call: Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    tier: str = ""
    error: Optional[DreamLinesError] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    @property
    def credential_rejected(self) -> bool:
        return isinstance(self.error, CredentialError)


class EmptyResultError(DreamLinesError):
    """A tier answered, but with nothing usable."""


async def first_success(
    strategies: Sequence[Strategy[T]],
    accept: Callable[[T], bool] = bool,
    label: str = "call",
) -> Outcome[T]:
    """Run ``strategies`` in order and return the first accepted result.

    A credential rejection ends the chain at once: trying a cheaper tier with
    the same key cannot succeed.
    """
    last_error: Optional[DreamLinesError] = None
    for attempt, strategy in enumerate(strategies, start=1):
        try:
            value = await strategy.call()
        except CredentialError as e:
            logger.error("%s: credential rejected on tier '%s': %s", label, strategy.tier, e)
            return Outcome(tier=strategy.tier, error=e, attempts=attempt)
        except DreamLinesError as e:
            logger.warning("%s: tier '%s' failed: %s", label, strategy.tier, e)
            last_error = e
            continue

        if accept(value):
            if attempt > 1:
                logger.info("%s: succeeded on fallback tier '%s'", label, strategy.tier)
            return Outcome(value=value, tier=strategy.tier, attempts=attempt)

        logger.warning("%s: tier '%s' returned an empty result", label, strategy.tier)
        last_error = EmptyResultError(f"{label} returned an empty result", {"tier": strategy.tier})

    return Outcome(error=last_error, attempts=len(strategies))
