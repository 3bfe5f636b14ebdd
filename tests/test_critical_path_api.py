"""
Critical path API tests, including the defensive cycle check on stored data.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from taskgraph.models import Dependency, Project, Task


async def create_project(client, name="Critical Path Test"):
    resp = await client.post("/projects/", json={"name": name})
    assert resp.status_code == 201
    return resp.json()["id"]


async def create_task(client, project_id, title, **fields):
    resp = await client.post(
        "/tasks/",
        json={"title": title, "project_id": project_id, **fields},
    )
    assert resp.status_code == 201
    return resp.json()["id"]


async def link(client, project_id, source_id, target_id):
    resp = await client.post(
        f"/projects/{project_id}/dependencies/",
        json={"source_task_id": source_id, "target_task_id": target_id},
    )
    assert resp.status_code == 201


class TestCriticalPathAPI:

    @pytest.mark.asyncio
    async def test_simple_chain(self, client):
        """A(2) -> B(3) -> C(5), A -> D(1): expect A, B, C."""
        project_id = await create_project(client)
        a = await create_task(client, project_id, "A", duration_days=2)
        b = await create_task(client, project_id, "B", duration_days=3)
        c = await create_task(client, project_id, "C", duration_days=5)
        d = await create_task(client, project_id, "D", duration_days=1)
        await link(client, project_id, a, b)
        await link(client, project_id, b, c)
        await link(client, project_id, a, d)

        resp = await client.get(f"/projects/{project_id}/critical-path")

        assert resp.status_code == 200
        body = resp.json()
        assert body["project_id"] == project_id
        assert body["task_ids"] == [a, b, c]
        assert body["total_duration_days"] == 10

    @pytest.mark.asyncio
    async def test_disconnected_components(self, client):
        project_id = await create_project(client)
        a = await create_task(client, project_id, "A", duration_days=2)
        b = await create_task(client, project_id, "B", duration_days=3)
        c = await create_task(client, project_id, "C", duration_days=1)
        d = await create_task(client, project_id, "D", duration_days=4)
        e = await create_task(client, project_id, "E", duration_days=4)
        await link(client, project_id, a, b)
        await link(client, project_id, c, d)
        await link(client, project_id, d, e)

        resp = await client.get(f"/projects/{project_id}/critical-path")

        assert resp.json()["task_ids"] == [c, d, e]
        assert resp.json()["total_duration_days"] == 9

    @pytest.mark.asyncio
    async def test_weights_from_dates(self, client):
        """Without a stored duration the date span is used; incomplete dates weigh 0."""
        project_id = await create_project(client)
        a = await create_task(client, project_id, "A", start_date="2026-01-01", end_date="2026-01-04")
        b = await create_task(client, project_id, "B", start_date="2026-01-05")
        c = await create_task(client, project_id, "C", duration_days=2)
        x = await create_task(client, project_id, "X", duration_days=4)
        await link(client, project_id, a, b)
        await link(client, project_id, b, c)

        resp = await client.get(f"/projects/{project_id}/critical-path")

        body = resp.json()
        assert body["task_ids"] == [a, b, c]
        assert body["total_duration_days"] == 5
        assert x not in body["task_ids"]

    @pytest.mark.asyncio
    async def test_empty_project(self, client):
        project_id = await create_project(client)

        resp = await client.get(f"/projects/{project_id}/critical-path")

        assert resp.status_code == 200
        assert resp.json()["task_ids"] == []
        assert resp.json()["total_duration_days"] == 0

    @pytest.mark.asyncio
    async def test_deleted_tasks_leave_the_graph(self, client):
        project_id = await create_project(client)
        a = await create_task(client, project_id, "A", duration_days=5)
        b = await create_task(client, project_id, "B", duration_days=5)
        c = await create_task(client, project_id, "C", duration_days=3)
        await link(client, project_id, a, b)

        await client.delete(f"/tasks/{a}")
        await client.delete(f"/tasks/{b}")

        resp = await client.get(f"/projects/{project_id}/critical-path")

        assert resp.json()["task_ids"] == [c]
        assert resp.json()["total_duration_days"] == 3

    @pytest.mark.asyncio
    async def test_updated_duration_changes_the_path(self, client):
        project_id = await create_project(client)
        a = await create_task(client, project_id, "A", duration_days=1)
        b = await create_task(client, project_id, "B", duration_days=5)

        before = await client.get(f"/projects/{project_id}/critical-path")
        assert before.json()["task_ids"] == [b]

        resp = await client.patch(f"/tasks/{a}", json={"duration_days": 9})
        assert resp.status_code == 200
        assert resp.json()["weight_days"] == 9

        after = await client.get(f"/projects/{project_id}/critical-path")
        assert after.json()["task_ids"] == [a]

    @pytest.mark.asyncio
    async def test_unknown_project(self, client):
        resp = await client.get(f"/projects/{uuid.uuid4()}/critical-path")

        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_deleted_project(self, client):
        project_id = await create_project(client)
        assert (await client.delete(f"/projects/{project_id}")).status_code == 204

        resp = await client.get(f"/projects/{project_id}/critical-path")

        assert resp.status_code == 404


class TestStoredCycle:
    """Rows written past the cycle guard must fail the read path loudly."""

    @pytest.mark.asyncio
    async def test_three_node_cycle_is_graph_invalid(self, client, test_session, caplog):
        project = Project(name="Corrupted")
        test_session.add(project)
        await test_session.flush()

        a = Task(title="A", duration_days=1, project_id=project.id)
        b = Task(title="B", duration_days=1, project_id=project.id)
        c = Task(title="C", duration_days=1, project_id=project.id)
        test_session.add_all([a, b, c])
        await test_session.flush()

        test_session.add_all([
            Dependency(source_task_id=a.id, target_task_id=b.id),
            Dependency(source_task_id=b.id, target_task_id=c.id),
            Dependency(source_task_id=c.id, target_task_id=a.id),
        ])
        await test_session.commit()

        resp = await client.get(f"/projects/{project.id}/critical-path")

        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == "internal_error"
        assert body["message"] == "An unexpected error occurred"
        assert body["details"] is None

        assert "not a DAG" in caplog.text
        assert str(a.id) in caplog.text

    @pytest.mark.asyncio
    async def test_storage_rejects_self_loop(self, test_session):
        project = Project(name="Constraint")
        test_session.add(project)
        await test_session.flush()
        task = Task(title="A", project_id=project.id)
        test_session.add(task)
        await test_session.flush()

        test_session.add(Dependency(source_task_id=task.id, target_task_id=task.id))
        with pytest.raises(IntegrityError):
            await test_session.flush()
