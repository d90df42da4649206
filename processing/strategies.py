"""
Ordered extraction strategies.

A field that can be found in several ways is described as a list of named
strategies. Each strategy returns a value or ``None``; the first non-empty
result wins.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, Tuple, TypeVar

from utils.exceptions import ParseAnomaly

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class Strategy(Generic[V]):
    """A named way of extracting one value."""

    name: str
    func: Callable[..., Optional[V]]

    def __call__(self, *args: Any, **kwargs: Any) -> Optional[V]:
        return self.func(*args, **kwargs)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return True
    return False


def first_match(strategies: Sequence[Strategy[V]], *args: Any, **kwargs: Any) -> Tuple[Optional[V], Optional[str]]:
    """
    Run strategies in order. A strategy may raise ParseAnomaly to report that
    its selector matched nothing; that counts as an empty result.

    Returns:
        (value, strategy name) for the first non-empty result, else (None, None)
    """
    for index, strategy in enumerate(strategies):
        try:
            value = strategy(*args, **kwargs)
        except ParseAnomaly as exc:
            logger.debug("Strategy '%s' found nothing: %s", strategy.name, exc.message)
            continue
        if not _is_empty(value):
            if index > 0:
                logger.debug("Strategy '%s' used after %d empty attempt(s)", strategy.name, index)
            return value, strategy.name
    return None, None
