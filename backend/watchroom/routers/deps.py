from typing import Annotated
from fastapi import Depends, Request
from watchroom.queries import WatchRoomQueries


def get_queries(request: Request) -> WatchRoomQueries:
    """Facade created in the application lifespan"""
    return request.app.state.queries


Queries = Annotated[WatchRoomQueries, Depends(get_queries)]
