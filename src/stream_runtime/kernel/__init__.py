from stream_runtime.records import Record, WindowKey

from .context import ContextFactory, ExecutionContext
from .dag import Dag, DagError, MissingProviderError, NodeContract, build_dag
from .runner import DriverClosedError, TopologyDefinition, TopologyDriver
from .step import Filter, FlatMap, Map, Step, Tap
from .topology import (
    KGroupedStream,
    KStream,
    KTable,
    ProcessorNode,
    StoreSpec,
    TimeWindowedKStream,
    TimeWindows,
    Topology,
    TopologyBuilder,
    TopologyError,
)

# Kernel exports are minimal and runtime-focused.
__all__ = [
    "ContextFactory",
    "ExecutionContext",
    "Dag",
    "DagError",
    "MissingProviderError",
    "NodeContract",
    "build_dag",
    "Record",
    "WindowKey",
    "DriverClosedError",
    "TopologyDefinition",
    "TopologyDriver",
    "Filter",
    "FlatMap",
    "Map",
    "Step",
    "Tap",
    "KGroupedStream",
    "KStream",
    "KTable",
    "ProcessorNode",
    "StoreSpec",
    "TimeWindowedKStream",
    "TimeWindows",
    "Topology",
    "TopologyBuilder",
    "TopologyError",
]
