from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from stream_runtime.records import Record

if TYPE_CHECKING:
    from stream_runtime.kernel.context import ExecutionContext


class Step(Protocol):
    # Processor node contract: (record, ctx) -> Iterable[record]; empty output drops the record.
    def __call__(self, record: Record, ctx: ExecutionContext) -> Iterable[Record]:
        raise NotImplementedError("Step protocol has no implementation")


@dataclass(frozen=True, slots=True)
class Map:
    # Map applies a transformation and emits exactly one output.
    fn: Callable[[Record, ExecutionContext], Record]

    def __call__(self, record: Record, ctx: ExecutionContext) -> Iterable[Record]:
        return [self.fn(record, ctx)]


@dataclass(frozen=True, slots=True)
class FlatMap:
    # FlatMap emits zero or more outputs per input, in the order produced.
    fn: Callable[[Record, ExecutionContext], Iterable[Record]]

    def __call__(self, record: Record, ctx: ExecutionContext) -> Iterable[Record]:
        return list(self.fn(record, ctx))


@dataclass(frozen=True, slots=True)
class Filter:
    # Filter drops or passes a record based on predicate.
    pred: Callable[[Record, ExecutionContext], bool]

    def __call__(self, record: Record, ctx: ExecutionContext) -> Iterable[Record]:
        return [record] if self.pred(record, ctx) else []


@dataclass(frozen=True, slots=True)
class Tap:
    # Tap performs a side-effect and returns the original record.
    fn: Callable[[Record, ExecutionContext], None]

    def __call__(self, record: Record, ctx: ExecutionContext) -> Iterable[Record]:
        self.fn(record, ctx)
        return [record]
