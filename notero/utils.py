from __future__ import annotations

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Awaitable, Callable, Generic, Iterator, Sequence, TypeVar, cast

_T = TypeVar("_T")


class lazyproperty(Generic[_T]):
    """Decorator like @property, but evaluated only on first access.

    Like @property, this can only be used to decorate methods having only a `self` parameter, and
    is accessed like an attribute on an instance, i.e. trailing parentheses are not used. Unlike
    @property, the decorated method is only evaluated on first access; the resulting value is
    cached and that same value returned on second and later access without re-evaluation of the
    method.

    The cached value is stored in the __dict__ of the *instance* under the name of the decorated
    method. Because this is a *data descriptor*, its `__get__()` method runs on each access and
    the instance __dict__ item of the same name is "shadowed" by the descriptor.

    A lazyproperty is read-only. Attempting to assign to a lazyproperty raises AttributeError
    unconditionally.
    """

    def __init__(self, fget: Callable[..., _T]) -> None:
        self._fget = fget
        self._name = fget.__name__
        functools.update_wrapper(self, fget)  # pyright: ignore

    def __get__(self, obj: Any, type: Any = None) -> _T:
        # --- when accessed on class, e.g. Obj.fget, just return this descriptor
        if obj is None:
            return self  # type: ignore

        value = obj.__dict__.get(self._name)
        if value is None:
            value = self._fget(obj)
            obj.__dict__[self._name] = value
        return cast(_T, value)

    def __set__(self, obj: Any, value: Any) -> None:
        """Raises unconditionally, to preserve read-only behavior."""
        raise AttributeError("can't set attribute")


def asyncio_run(fn: Callable[..., Awaitable[_T]], *args: Any, **kwargs: Any) -> _T:
    """Run coroutine-function `fn` to completion from synchronous code.

    When called from inside a running event loop (e.g. a notebook or an async host), the
    coroutine is run on its own loop in a dedicated thread so it doesn't conflict with the
    caller's loop.
    """
    from notero.logger import logger

    current_loop = asyncio._get_running_loop()
    if current_loop is None:
        return asyncio.run(fn(*args, **kwargs))  # pyright: ignore[reportArgumentType]
    with ThreadPoolExecutor(thread_name_prefix="asyncio") as thread_pool:
        logger.warning(
            f"async code being run in dedicated thread pool "
            f"to not conflict with existing event loop: {current_loop}"
        )

        def wrapped() -> _T:
            return asyncio.run(fn(*args, **kwargs))  # pyright: ignore[reportArgumentType]

        future = thread_pool.submit(wrapped)
        return future.result()


def iter_slices(items: Sequence[_T], size: int) -> Iterator[Sequence[_T]]:
    """Generate consecutive slices of `items`, each at most `size` long."""
    for start in range(0, len(items), size):
        yield items[start : start + size]

