"""Request dispatch.

Two shapes over one pipeline (run_exchange):

    Task  a deferred computation; nothing is sent until it is run, so
          tasks can be mapped, chained and combined first.
    Cmd   an effect description handed to a Runtime, which performs the
          exchange and dispatches exactly one message with the outcome.

Example:
    cmd = send_query(URL, GotViewer, request)
    runtime = Runtime(HttpxEngine(), dispatch=inbox.append)
    runtime.perform(cmd)

    task = query_task(URL, first).and_then(lambda a: query_task(URL, second))
    outcome = await task.run(engine)
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from .config import EndpointConfig
from .encoder import Part
from .engine import HttpEngine
from .errors import OperationKindError
from .outcome import Outcome
from .request import BuiltRequest, OperationKind
from .resolver import resolve
from .transport import WireRequest, for_request

T = TypeVar("T")
U = TypeVar("U")
Msg = TypeVar("Msg")

logger = logging.getLogger(__name__)


async def run_exchange(engine: HttpEngine, wire: WireRequest, decoder: Callable[[Any], T]) -> Outcome[T]:
    """Perform one exchange and resolve it. Never retries."""
    return resolve(await engine.execute(wire), decoder)


class Task(Generic[T]):
    """A composable unit of work run against an HTTP engine."""

    def __init__(self, step: Callable[[HttpEngine], Awaitable[T]]):
        self._step = step

    async def run(self, engine: HttpEngine) -> T:
        return await self._step(engine)

    @classmethod
    def succeed(cls, value: T) -> "Task[T]":
        async def step(_engine):
            return value
        return cls(step)

    def map(self, fn: Callable[[T], U]) -> "Task[U]":
        async def step(engine):
            return fn(await self.run(engine))
        return Task(step)

    def and_then(self, fn: Callable[[T], "Task[U]"]) -> "Task[U]":
        """Chain a task built from this task's result."""
        async def step(engine):
            return await fn(await self.run(engine)).run(engine)
        return Task(step)

    @staticmethod
    def sequence(tasks: Iterable["Task[Any]"]) -> "Task[list[Any]]":
        """Run tasks one after another, collecting results in order."""
        tasks = list(tasks)

        async def step(engine):
            return [await task.run(engine) for task in tasks]
        return Task(step)

    @staticmethod
    def gather(tasks: Iterable["Task[Any]"]) -> "Task[list[Any]]":
        """Run tasks concurrently, collecting results in order."""
        tasks = list(tasks)

        async def step(engine):
            return list(await asyncio.gather(*(task.run(engine) for task in tasks)))
        return Task(step)

    def attempt(self, to_msg: Callable[[T], Msg], cancellation_tag: str | None = None) -> "Cmd[Msg]":
        """Turn this task into a command delivering one message."""
        return Cmd(tasks=((self, to_msg),), cancellation_tag=cancellation_tag)


@dataclass(frozen=True)
class Cmd(Generic[Msg]):
    """An effect description executed by a Runtime."""
    tasks: tuple[tuple[Task[Any], Callable[[Any], Msg]], ...] = ()
    cancellation_tag: str | None = None
    children: tuple["Cmd[Msg]", ...] = field(default=())

    @classmethod
    def none(cls) -> "Cmd[Any]":
        return cls()

    @classmethod
    def batch(cls, cmds: Iterable["Cmd[Msg]"]) -> "Cmd[Msg]":
        return cls(children=tuple(cmds))

    def map(self, fn: Callable[[Msg], U]) -> "Cmd[U]":
        """Transform the messages this command produces."""
        return Cmd(
            tasks=tuple((task, _compose(fn, to_msg)) for task, to_msg in self.tasks),
            cancellation_tag=self.cancellation_tag,
            children=tuple(child.map(fn) for child in self.children),
        )


def _compose(outer, inner):
    return lambda value: outer(inner(value))


class Runtime(Generic[Msg]):
    """Executes commands on the running event loop.

    Args:
        engine: HTTP engine performing the exchanges
        dispatch: Receives every message produced by a command
    """

    def __init__(self, engine: HttpEngine, dispatch: Callable[[Msg], None]):
        self.engine = engine
        self.dispatch = dispatch
        self._in_flight: dict[asyncio.Task, str | None] = {}
        self._cancelled: set[asyncio.Task] = set()

    def perform(self, cmd: Cmd[Msg]) -> list[asyncio.Task]:
        """Start every exchange in the command. Returns the scheduled tasks."""
        loop = asyncio.get_running_loop()
        scheduled = []
        for task, to_msg in cmd.tasks:
            handle = loop.create_task(self._deliver(task, to_msg))
            self._in_flight[handle] = cmd.cancellation_tag
            handle.add_done_callback(self._forget)
            scheduled.append(handle)
        for child in cmd.children:
            scheduled.extend(self.perform(child))
        return scheduled

    async def _deliver(self, task: Task[Any], to_msg: Callable[[Any], Msg]):
        result = await task.run(self.engine)
        if asyncio.current_task() in self._cancelled:
            return
        self.dispatch(to_msg(result))

    def _forget(self, handle: asyncio.Task):
        self._in_flight.pop(handle, None)
        self._cancelled.discard(handle)

    def cancel(self, tag: str) -> int:
        """Stop delivery for every in-flight exchange carrying this tag.

        The underlying request is cancelled too, but may already have
        reached the server. Returns the number of exchanges affected.
        """
        count = 0
        for handle, handle_tag in list(self._in_flight.items()):
            if handle_tag == tag and not handle.done():
                self._cancelled.add(handle)
                handle.cancel()
                count += 1
        logger.debug("Cancelled %d exchange(s) tagged %r", count, tag)
        return count

    async def drain(self):
        """Wait for every in-flight exchange to finish or be cancelled.

        Re-raises the first unexpected exception an exchange raised.
        """
        while self._in_flight:
            results = await asyncio.gather(*self._in_flight, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    raise result


def _check_kind(request: BuiltRequest, expected: OperationKind):
    if request.kind is not expected:
        raise OperationKindError(
            f"Expected a {expected.value} request, got a {request.kind.value} request"
        )


def _exchange_task(
    config: EndpointConfig,
    request: BuiltRequest[T],
    part_name: str | None = None,
    parts: Iterable[Part] = (),
) -> Task[Outcome[T]]:
    parts = tuple(parts)

    async def step(engine):
        wire = for_request(config, request, part_name, parts)
        return await run_exchange(engine, wire, request.decode_data)
    return Task(step)


# Deferred computations


def custom_query_task(config: EndpointConfig, request: BuiltRequest[T]) -> Task[Outcome[T]]:
    _check_kind(request, OperationKind.QUERY)
    return _exchange_task(config, request)


def custom_mutation_task(config: EndpointConfig, request: BuiltRequest[T]) -> Task[Outcome[T]]:
    _check_kind(request, OperationKind.MUTATION)
    return _exchange_task(config, request)


def custom_mutation_with_body_parts_task(
    part_name: str,
    extra_parts: Iterable[Part],
    config: EndpointConfig,
    request: BuiltRequest[T],
) -> Task[Outcome[T]]:
    """Multipart mutation: the envelope goes in part_name, then extra_parts."""
    _check_kind(request, OperationKind.MUTATION)
    return _exchange_task(config, request, part_name, extra_parts)


def query_task(url: str, request: BuiltRequest[T]) -> Task[Outcome[T]]:
    return custom_query_task(EndpointConfig(url), request)


def mutation_task(url: str, request: BuiltRequest[T]) -> Task[Outcome[T]]:
    return custom_mutation_task(EndpointConfig(url), request)


# Effects


def custom_send_query(
    config: EndpointConfig,
    to_msg: Callable[[Outcome[T]], Msg],
    request: BuiltRequest[T],
) -> Cmd[Msg]:
    return custom_query_task(config, request).attempt(to_msg, config.cancellation_tag)


def custom_send_mutation(
    config: EndpointConfig,
    to_msg: Callable[[Outcome[T]], Msg],
    request: BuiltRequest[T],
) -> Cmd[Msg]:
    return custom_mutation_task(config, request).attempt(to_msg, config.cancellation_tag)


def custom_send_mutation_with_body_parts(
    part_name: str,
    extra_parts: Iterable[Part],
    config: EndpointConfig,
    to_msg: Callable[[Outcome[T]], Msg],
    request: BuiltRequest[T],
) -> Cmd[Msg]:
    task = custom_mutation_with_body_parts_task(part_name, extra_parts, config, request)
    return task.attempt(to_msg, config.cancellation_tag)


def send_query(url: str, to_msg: Callable[[Outcome[T]], Msg], request: BuiltRequest[T]) -> Cmd[Msg]:
    return custom_send_query(EndpointConfig(url), to_msg, request)


def send_mutation(url: str, to_msg: Callable[[Outcome[T]], Msg], request: BuiltRequest[T]) -> Cmd[Msg]:
    return custom_send_mutation(EndpointConfig(url), to_msg, request)
