"""REST API routers for HiveRoute."""

from hiveroute.api.hive import router as hive_router

__all__ = ["hive_router"]
