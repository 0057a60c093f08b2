from fastapi import Request

from taskboard.database.pool import ConnectionPool


def get_pool(request: Request) -> ConnectionPool:
    return request.app.state.pool
