"""RQ worker for best-effort background jobs."""

import os

import redis
from dotenv import load_dotenv
from rq import Queue, Worker

from reefmag.services.queue import TaskQueue

load_dotenv()


def get_redis_connection():
    """Get Redis connection from environment."""
    redis_url = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    return redis.from_url(redis_url)


def main():
    redis_conn = get_redis_connection()
    queue = Queue(TaskQueue.queue_name, connection=redis_conn)
    worker = Worker([queue], connection=redis_conn)

    print("Starting RQ worker...")
    print(f"Listening on queue: {queue.name}")
    try:
        worker.work()
    except KeyboardInterrupt:
        print("\nWorker stopped by user")


if __name__ == '__main__':
    main()
