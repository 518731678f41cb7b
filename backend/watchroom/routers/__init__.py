from watchroom.routers.users import router as users_router
from watchroom.routers.rooms import router as rooms_router
from watchroom.routers.chat import router as chat_router

__all__ = ["users_router", "rooms_router", "chat_router"]
