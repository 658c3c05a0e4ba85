from app.api.v1.swipes.endpoints import router, debug_router

__all__ = ["router", "debug_router"]
