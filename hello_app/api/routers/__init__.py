"""
Router package for hello-app.

- hello: the instrumented GET /hello endpoint
"""

from hello_app.api.routers.hello import router as hello_router

__all__ = [
    "hello_router",
]
