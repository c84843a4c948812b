"""Cache-aside and write-then-invalidate decorators.

These decorators wrap async read and write functions so that reads go
through a CacheAsideService and writes purge dependent cache entries
after they complete.
"""

import functools
import inspect
import logging
import re
from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import Any, TypeVar

from tourcore.core.interfaces.invalidator import IInvalidator
from tourcore.core.services.cache_aside import CacheAsideService
from tourcore.exceptions import InvalidationError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

KeySpec = str | Callable[..., str]
PatternSpec = str | Iterable[str] | Callable[..., str | Iterable[str]]


def cached(
    service: CacheAsideService,
    key: KeySpec,
    ttl: timedelta | None = None,
) -> Callable[[F], F]:
    """Decorator for cache-aside reads.

    On a hit the cached value is returned and the wrapped function is not
    called. On a miss (including a cache outage) the function runs and its
    result is cached.

    Args:
        service: Cache-aside service to read and populate through.
        key: Key template with {arg_name} placeholders, or a callable
            receiving the call's arguments and returning the key.
        ttl: TTL for populated entries. Uses config default if None.

    Example:
        @cached(cache, key="tour:{tour_id}")
        async def get_tour(tour_id: int) -> dict:
            return await db.get_tour(tour_id)
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            cache_key = _resolve_key(key, signature, args, kwargs)
            lookup = await service.lookup(cache_key, ttl)
            if lookup.hit:
                return lookup.value

            result = await func(*args, **kwargs)
            await service.populate(cache_key, result, ttl)
            return result

        return wrapper  # type: ignore

    return decorator


def invalidates(
    invalidator: IInvalidator,
    patterns: PatternSpec,
    raise_on_failure: bool = False,
) -> Callable[[F], F]:
    """Decorator for invalidating cache entries after a write.

    Executes the decorated function first and only then invalidates, so
    the authoritative write always completes before dependent entries are
    purged. If the write raises, nothing is invalidated.

    Args:
        invalidator: Invalidator to purge through.
        patterns: One pattern or several with {arg_name} placeholders, or a
            callable receiving the call's arguments and returning them.
        raise_on_failure: Re-raise InvalidationError instead of logging it.
            The invalidator keeps failed patterns pending either way.

    Example:
        @invalidates(invalidator, patterns=["tour:{tour_id}", "tour:list*"])
        async def update_tour(tour_id: int, data: dict) -> dict:
            return await db.update_tour(tour_id, data)
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = await func(*args, **kwargs)

            resolved = _resolve_patterns(patterns, signature, args, kwargs)
            try:
                await invalidator.invalidate(resolved)
            except InvalidationError as e:
                if raise_on_failure:
                    raise
                logger.error(f"Invalidation after {func.__name__} failed: {e}")

            return result

        return wrapper  # type: ignore

    return decorator


def _resolve_key(
    key: KeySpec,
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> str:
    if callable(key):
        return key(*args, **kwargs)
    return _interpolate_string(key, _bind(signature, args, kwargs))


def _resolve_patterns(
    patterns: PatternSpec,
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> list[str]:
    if callable(patterns):
        resolved = patterns(*args, **kwargs)
        return [resolved] if isinstance(resolved, str) else list(resolved)
    if isinstance(patterns, str):
        patterns = [patterns]
    arguments = _bind(signature, args, kwargs)
    return [_interpolate_string(pattern, arguments) for pattern in patterns]


def _bind(
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()
    return dict(bound.arguments)


def _interpolate_string(template: str, arguments: dict[str, Any]) -> str:
    """Interpolate {arg_name} placeholders in string.

    Args:
        template: String with {arg_name} placeholders.
        arguments: Bound call arguments by name.

    Returns:
        Interpolated string. Unknown placeholders are left as they are.
    """
    pattern = r"\{(\w+)\}"

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in arguments:
            return str(arguments[name])
        return match.group(0)  # Keep original if not found

    return re.sub(pattern, replacer, template)
