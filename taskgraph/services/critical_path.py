"""
Critical path computation.

The critical path is the chain of dependent tasks whose summed durations
is largest. Any delay on it delays the whole project.

Algorithm (longest path in a DAG, weights on nodes):
1. Topologically sort the graph (Kahn's algorithm, see services.graph)
2. best[n] = weight[n]; relax every edge u -> v in topological order:
   best[v] = max(best[v], best[u] + weight[v]), remembering the predecessor
3. The end node is the one with the largest best[] value
4. Follow predecessors back from the end node and reverse
"""

import uuid
from dataclasses import dataclass, field

import networkx as nx
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.exceptions import GraphInvalidError
from taskgraph.services.graph import (
    build_graph,
    resolve_edges,
    resolve_nodes,
    topological_order,
)
from taskgraph.services.lookup import get_live_project
from taskgraph.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CriticalPath:
    """Critical path of one project."""
    project_id: uuid.UUID
    task_ids: list[uuid.UUID] = field(default_factory=list)
    total_duration_days: int = 0


def longest_weighted_path(graph: nx.DiGraph, order: list) -> tuple[list, int]:
    """
    Find the maximum-weight chain in a DAG whose nodes carry a `weight`.

    `order` must be a topological order of every node in `graph`.
    The whole graph is searched at once, so the winner may come from any
    connected component. When several end nodes tie, the one earliest in
    `order` wins.

    Returns (path, total_weight); ([], 0) for an empty graph.
    """
    if not order:
        return [], 0

    best = {node: graph.nodes[node]["weight"] for node in order}
    predecessor = dict.fromkeys(order)

    for node in order:
        for successor in graph.successors(node):
            candidate = best[node] + graph.nodes[successor]["weight"]
            if candidate > best[successor]:
                best[successor] = candidate
                predecessor[successor] = node

    # max() keeps the first maximal element
    end_node = max(order, key=best.__getitem__)

    path = [end_node]
    while predecessor[path[-1]] is not None:
        path.append(predecessor[path[-1]])
    path.reverse()

    return path, best[end_node]


async def compute_critical_path(
    session: AsyncSession,
    project_id: uuid.UUID,
) -> CriticalPath:
    """
    Compute the critical path of a project from its current tasks and edges.

    Raises NotFoundError if the project is missing or deleted, and
    GraphInvalidError if the stored edges contain a cycle.
    """
    await get_live_project(session, project_id)

    weights = await resolve_nodes(session, project_id)
    edges = await resolve_edges(session, project_id)
    graph = build_graph(weights, edges)

    try:
        order = topological_order(graph)
    except GraphInvalidError as exc:
        node_weights = {str(node): weight for node, weight in weights.items()}
        edge_pairs = [(str(source), str(target)) for source, target in edges]
        logger.error(
            f"Dependency graph is not a DAG: project={project_id} "
            f"unordered={[str(node) for node in exc.unordered_ids]} "
            f"nodes={node_weights} edges={edge_pairs}"
        )
        raise

    task_ids, total = longest_weighted_path(graph, order)

    logger.info(
        f"Critical path for project={project_id}: "
        f"{len(task_ids)} of {len(weights)} tasks, {total} days"
    )

    return CriticalPath(
        project_id=project_id,
        task_ids=task_ids,
        total_duration_days=total,
    )
