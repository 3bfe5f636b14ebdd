"""
Per-project write locks for dependency inserts.

The cycle check and the insert are two statements. Holding the project's
lock across both (and the commit) keeps two requests in this process from
each passing the check and jointly closing a cycle. Separate processes
are not coordinated.

Locks are held weakly: an entry lives only while some writer holds or
waits on the lock, so the map does not grow with every project written.
"""

import asyncio
import uuid
import weakref
from contextlib import nullcontext
from typing import AsyncContextManager

from taskgraph.config import get_settings

_project_locks: "weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock]" = weakref.WeakValueDictionary()


def project_write_lock(project_id: uuid.UUID) -> asyncio.Lock:
    """Get or create the lock for a project."""
    lock = _project_locks.get(project_id)
    if lock is None:
        lock = asyncio.Lock()
        _project_locks[project_id] = lock
    return lock


def dependency_write_guard(project_id: uuid.UUID) -> AsyncContextManager:
    """The project's lock, or a no-op when serialization is switched off."""
    if get_settings().serialize_dependency_writes:
        return project_write_lock(project_id)
    return nullcontext()
