"""RQ queue setup — shared by API (enqueue) and worker (dequeue)."""

import redis
from rq import Queue

from meterhub.settings import settings

_redis_conn: redis.Redis | None = None
_queue: Queue | None = None


def get_redis() -> redis.Redis:
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = redis.from_url(settings.redis_url)
    return _redis_conn


def get_queue() -> Queue:
    global _queue
    if _queue is None:
        _queue = Queue(settings.rq_queue_name, connection=get_redis())
    return _queue


def enqueue_batch_import(
    path: str | None = None,
    roster_name: str | None = None,
    reading_names: list[str] | None = None,
) -> str:
    """
    Enqueue a batch import job.
    Run a single worker on this queue; it is what serializes batch imports.
    Returns the job ID for status tracking.
    """
    from meterhub.workers.import_jobs import run_batch_import  # avoid circular import

    job = get_queue().enqueue(
        run_batch_import,
        args=(path, roster_name, reading_names),
        job_timeout=600,  # 10 minutes max per batch
        result_ttl=3600,  # keep result for 1 hour
        failure_ttl=86400,  # keep failed job info for 24 hours
    )
    return job.id
