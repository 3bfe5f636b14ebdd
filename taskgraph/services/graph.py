"""
Graph operations using NetworkX.

This module handles:
- Resolving a project's live tasks into weighted nodes
- Resolving the project's dependency rows into edges
- Cycle guarding for new dependencies
- Topological ordering (Kahn's algorithm) with cycle detection
"""

import heapq
import uuid
from datetime import date
from typing import Hashable, Iterable

import networkx as nx
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskgraph.models import Task, Dependency
from taskgraph.exceptions import (
    CycleDetectedError,
    GraphInvalidError,
    ReverseDependencyExistsError,
    SelfDependencyError,
)
from taskgraph.logging_config import get_logger

logger = get_logger(__name__)

Edge = tuple[uuid.UUID, uuid.UUID]


def task_weight(
    duration_days: int | None,
    start_date: date | None,
    end_date: date | None,
) -> int:
    """
    Duration in whole days that a task contributes to a path.

    Priority: explicit duration, then the calendar-day span between
    start and end, then 0. Never negative.
    """
    if duration_days is not None:
        return max(duration_days, 0)
    if start_date is not None and end_date is not None:
        return max((end_date - start_date).days, 0)
    return 0


async def resolve_nodes(
    session: AsyncSession,
    project_id: uuid.UUID,
) -> dict[uuid.UUID, int]:
    """
    Load every live task of a project as task_id -> weight.

    The keys are the project's node set.
    """
    result = await session.execute(
        select(Task)
        .where(Task.project_id == project_id, Task.deleted_at.is_(None))
        .order_by(Task.created_at, Task.id)
    )
    return {
        task.id: task_weight(task.duration_days, task.start_date, task.end_date)
        for task in result.scalars().all()
    }


async def load_project_dependencies(
    session: AsyncSession,
    project_id: uuid.UUID,
) -> list[Dependency]:
    """
    Fetch dependency rows whose source task is a live task of the project.

    Parallel rows between the same pair are returned as stored.
    """
    result = await session.execute(
        select(Dependency)
        .join(Task, Task.id == Dependency.source_task_id)
        .where(Task.project_id == project_id, Task.deleted_at.is_(None))
        .order_by(Dependency.created_at, Dependency.id)
    )
    return list(result.scalars().all())


async def resolve_edges(
    session: AsyncSession,
    project_id: uuid.UUID,
) -> list[Edge]:
    """Load the project's edges as ordered (source, target) pairs."""
    dependencies = await load_project_dependencies(session, project_id)
    return [(dep.source_task_id, dep.target_task_id) for dep in dependencies]


def build_graph(
    weights: dict[Hashable, int],
    edges: Iterable[tuple[Hashable, Hashable]],
) -> nx.DiGraph:
    """
    Build a NetworkX DiGraph from node weights and (source, target) edges.

    Returns a graph where:
    - Nodes are task IDs with a `weight` attribute
    - Edges go from source -> target; parallel edges collapse to one
    - Edges touching a task outside the node set are dropped
    """
    graph = nx.DiGraph()

    for node_id, weight in weights.items():
        graph.add_node(node_id, weight=weight)

    skipped = 0
    for source_id, target_id in edges:
        if source_id not in weights or target_id not in weights:
            skipped += 1
            continue
        graph.add_edge(source_id, target_id)

    if skipped:
        logger.debug(f"Skipped {skipped} edges pointing outside the node set")

    return graph


def check_new_dependency(
    edges: Iterable[tuple[Hashable, Hashable]],
    source_id: Hashable,
    target_id: Hashable,
) -> None:
    """
    Decide whether edge (source -> target) may be added to the existing edges.

    Checks, in order:
    1. Self-loop -> SelfDependencyError
    2. Reverse edge (target -> source) exists -> ReverseDependencyExistsError
    3. Target already reaches source -> CycleDetectedError

    Returns None when the edge is acceptable.
    """
    if source_id == target_id:
        raise SelfDependencyError(str(source_id))

    graph = nx.DiGraph()
    graph.add_edges_from(edges)

    if graph.has_edge(target_id, source_id):
        raise ReverseDependencyExistsError(str(source_id), str(target_id))

    if target_id in graph and source_id in nx.descendants(graph, target_id):
        raise CycleDetectedError(str(source_id), str(target_id))


def topological_order(graph: nx.DiGraph) -> list:
    """
    Order the graph's nodes with Kahn's algorithm.

    Among nodes that are ready at the same time the lowest id goes first,
    so the order is reproducible for a given graph.

    Raises GraphInvalidError when some nodes can never be ordered, which
    means the graph has a cycle.
    """
    in_degree = {node: graph.in_degree(node) for node in graph.nodes}
    ready = [node for node, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)

    order = []
    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for successor in graph.successors(node):
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                heapq.heappush(ready, successor)

    if len(order) < graph.number_of_nodes():
        unordered = [node for node, degree in in_degree.items() if degree > 0]
        raise GraphInvalidError(unordered)

    return order
