"""
=============================================================================
CORE NETWORKING & CONCURRENCY
=============================================================================

    socket_server.py   Listening socket and accept loop
    connection.py      One client socket: single read, write, close
    thread_pool.py     Fixed-size worker pool and job queue

    accept loop ──Connection──► FileServer ──submit(job)──► ThreadPool
                                                              │
                                                   Worker runs the job:
                                                   read → parse → handle
                                                   → write → close

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .thread_pool import ThreadPool, Worker, WorkerState, Job

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "ThreadPool",
    "Worker",
    "WorkerState",
    "Job",
]
