#!/usr/bin/env python3
"""
Seed script to generate a large task graph for performance testing.

Generates a layered DAG with realistic project structure:
- Multiple parallel tracks
- Diamond patterns (convergence points)
- Milestones (duration 0) and tasks weighted only by their dates

Every edge goes through the same cycle guard as the API, so the seeded
graph is always a DAG.

Usage:
    python -m scripts.seed [--nodes 500] [--clear]

Options:
    --nodes N    Number of nodes to generate (default: 500)
    --clear      Clear existing data before seeding
    --project    Name of the project to create
    --seed       Random seed for a reproducible graph
"""

import argparse
import asyncio
import random
import time
import uuid
from datetime import date, timedelta
from typing import List, Tuple

from sqlalchemy import delete, func, select

from taskgraph.database import get_session_context, init_db
from taskgraph.exceptions import TaskGraphException
from taskgraph.models import Project, Task, Dependency
from taskgraph.services.critical_path import compute_critical_path
from taskgraph.services.graph import check_new_dependency


async def clear_data():
    """Clear all existing data."""
    print("Clearing existing data...")
    async with get_session_context() as session:
        await session.execute(delete(Dependency))
        await session.execute(delete(Task))
        await session.execute(delete(Project))
    print("Data cleared.")


async def create_project(name: str) -> Project:
    """Create a project for the tasks."""
    async with get_session_context() as session:
        project = Project(name=name, description="Performance test project with tasks")
        session.add(project)
        await session.flush()
        await session.refresh(project)
        return project


def generate_dag(
    project_id: uuid.UUID,
    num_nodes: int = 500,
) -> Tuple[List[Task], List[Dependency], int]:
    """
    Generate a layered DAG structure.

    Strategy:
    - Create tasks in "waves" (levels)
    - Each wave depends on some tasks from the previous three waves
    - Occasionally propose a backwards edge; the cycle guard rejects it
    - 10% of tasks are milestones, 20% carry dates instead of a duration

    Returns:
        Tuple of (tasks, dependencies, rejected edge count)
    """
    tasks = []
    dependencies = []
    edges = []
    rejected = 0

    num_waves = max(10, num_nodes // 50)  # ~50 tasks per wave
    tasks_per_wave = max(1, num_nodes // num_waves)
    start_date = date(2025, 1, 1)

    print(f"Generating {num_nodes} tasks in {num_waves} waves...")

    tasks_by_wave = []

    for wave in range(num_waves):
        wave_tasks = []
        wave_size = tasks_per_wave

        # Last wave gets remaining tasks
        if wave == num_waves - 1:
            wave_size = num_nodes - len(tasks)

        for i in range(wave_size):
            roll = random.random()
            task = Task(
                title=f"Task W{wave:02d}-{i:03d}",
                description=f"Wave {wave}, Task {i}",
                project_id=project_id,
            )
            if roll < 0.1:
                task.duration_days = 0
            elif roll < 0.3:
                task.start_date = start_date + timedelta(days=wave * 7)
                task.end_date = task.start_date + timedelta(days=random.randint(1, 10))
            else:
                task.duration_days = random.randint(1, 10)
            tasks.append(task)
            wave_tasks.append(task)

        tasks_by_wave.append(wave_tasks)

        if wave == 0:
            continue

        for task in wave_tasks:
            # Each task depends on 1-3 tasks from recent waves
            num_deps = random.randint(1, min(3, len(tasks_by_wave[wave - 1])))
            available_waves = list(range(max(0, wave - 3), wave))

            for _ in range(num_deps):
                dep_task = random.choice(tasks_by_wave[random.choice(available_waves)])
                source, target = dep_task, task
                # 5% of proposals point backwards and should be rejected
                if random.random() < 0.05:
                    source, target = task, dep_task

                try:
                    check_new_dependency(edges, source.id, target.id)
                except TaskGraphException:
                    rejected += 1
                    continue

                edges.append((source.id, target.id))
                dependencies.append(Dependency(
                    source_task_id=source.id,
                    target_task_id=target.id,
                ))

    return tasks, dependencies, rejected


async def insert_batch(tasks: List[Task], dependencies: List[Dependency]):
    """Insert tasks and dependencies in batches for performance."""
    batch_size = 100

    async with get_session_context() as session:
        print(f"Inserting {len(tasks)} tasks...")
        for i in range(0, len(tasks), batch_size):
            session.add_all(tasks[i:i + batch_size])
            await session.flush()
            if (i + batch_size) % 500 == 0:
                print(f"  Inserted {min(i + batch_size, len(tasks))} tasks...")

        print(f"Inserting {len(dependencies)} dependencies...")
        for i in range(0, len(dependencies), batch_size):
            session.add_all(dependencies[i:i + batch_size])
            await session.flush()
            if (i + batch_size) % 500 == 0:
                print(f"  Inserted {min(i + batch_size, len(dependencies))} dependencies...")


async def get_stats(project_id: uuid.UUID):
    """Print statistics about the generated graph."""
    async with get_session_context() as session:
        in_project = Task.project_id == project_id

        num_tasks = (await session.execute(
            select(func.count()).select_from(Task).where(in_project)
        )).scalar()

        num_deps = (await session.execute(
            select(func.count())
            .select_from(Dependency)
            .join(Task, Task.id == Dependency.source_task_id)
            .where(in_project)
        )).scalar()

        # Roots have no incoming edge, leaves no outgoing one
        num_roots = (await session.execute(
            select(func.count()).select_from(Task).where(
                in_project,
                ~select(Dependency.id).where(Dependency.target_task_id == Task.id).exists(),
            )
        )).scalar()

        num_leaves = (await session.execute(
            select(func.count()).select_from(Task).where(
                in_project,
                ~select(Dependency.id).where(Dependency.source_task_id == Task.id).exists(),
            )
        )).scalar()

        avg_deps = num_deps / num_tasks if num_tasks > 0 else 0

        print("\n=== Graph Statistics ===")
        print(f"Tasks:        {num_tasks}")
        print(f"Dependencies: {num_deps}")
        print(f"Root tasks:   {num_roots} (no predecessors)")
        print(f"Leaf tasks:   {num_leaves} (no successors)")
        print(f"Avg deps/task: {avg_deps:.2f}")


async def run_benchmark(project_id: uuid.UUID):
    """Time a full critical path computation over the seeded project."""
    async with get_session_context() as session:
        start_time = time.time()
        result = await compute_critical_path(session, project_id)
        elapsed = time.time() - start_time

    print("\n=== Critical Path ===")
    print(f"Length:       {len(result.task_ids)} tasks")
    print(f"Total:        {result.total_duration_days} days")
    print(f"Compute time: {elapsed * 1000:.2f}ms")


async def main():
    parser = argparse.ArgumentParser(description="Seed the database with a large task graph")
    parser.add_argument("--nodes", type=int, default=500, help="Number of tasks to create")
    parser.add_argument("--clear", action="store_true", help="Clear existing data first")
    parser.add_argument("--project", type=str, default="Performance Test", help="Project name")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--no-benchmark", action="store_true", help="Skip the critical path timing")

    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    print("=== taskgraph Seed Script ===")
    print(f"Generating {args.nodes} nodes...")

    await init_db()

    if args.clear:
        await clear_data()

    project = await create_project(args.project)
    print(f"Created project: {project.name} ({project.id})")

    start_time = time.time()
    tasks, dependencies, rejected = generate_dag(project.id, args.nodes)
    gen_time = time.time() - start_time
    print(f"Generation time: {gen_time:.2f}s ({rejected} cyclic edges rejected)")

    start_time = time.time()
    await insert_batch(tasks, dependencies)
    insert_time = time.time() - start_time
    print(f"Insert time: {insert_time:.2f}s")

    await get_stats(project.id)

    if not args.no_benchmark:
        await run_benchmark(project.id)

    print("\n=== Seeding Complete ===")
    print(f"Project ID: {project.id}")


if __name__ == "__main__":
    asyncio.run(main())
