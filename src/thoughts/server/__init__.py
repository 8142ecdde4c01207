"""HTTP surface — document middleware, status endpoints, page template."""

from thoughts.server.page import PageRenderer
from thoughts.server.router import HEALTH_ENDPOINT, STATS_ENDPOINT, SiteRouter

__all__ = ["HEALTH_ENDPOINT", "STATS_ENDPOINT", "PageRenderer", "SiteRouter"]
