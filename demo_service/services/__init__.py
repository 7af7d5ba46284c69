"""Services for demo-service.

- resources: downstream resources fetch (getResources span)
"""

from demo_service.services.resources import build_http_client, get_resources

__all__ = ["build_http_client", "get_resources"]
