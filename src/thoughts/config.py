"""Thoughts configuration.

ThoughtsConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ThoughtsConfig:
    """Configuration for a Thoughts site.

    Attributes:
        root: Working directory of the site. The disk cache and user
              templates live under it. Always resolved to an absolute path.
        repo: GitHub repository URL (``https://github.com/{owner}/{name}``).
        title: Site title rendered into every page.
        host: Bind address for the HTTP server.
        port: Bind port for the HTTP server.
        use_cache: Wrap the live source in the disk-backed cache.
        cache_dir: Cache directory, relative to ``root`` unless absolute.
        api_url: Base URL of the GitHub REST API.
        branch: Branch whose zipball is pulled.
        sync_interval: Seconds between background refreshes.
        request_timeout: Timeout in seconds for each source request.
        shutdown_grace: Seconds to wait for the refresh loop to stop and for
                        in-flight requests to drain on shutdown.
        templates_dir: Directory with user templates overriding the theme.
        user_agent: Client marker sent with every source request.

    """

    root: Path = field(default_factory=Path.cwd)
    repo: str = ""
    title: str = "thoughts"
    host: str = "0.0.0.0"
    port: int = 8080
    use_cache: bool = False
    cache_dir: str = "cache"
    api_url: str = "https://api.github.com"
    branch: str = "main"
    sync_interval: float = 300.0
    request_timeout: float = 5.0
    shutdown_grace: float = 5.0
    templates_dir: str = "templates"
    user_agent: str = "thoughts-agent"

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def cache_path(self) -> Path:
        """Absolute path to the disk cache directory."""
        path = Path(self.cache_dir)
        if path.is_absolute():
            return path
        return self.root / path

    @property
    def templates_path(self) -> Path:
        """Absolute path to the user templates directory."""
        return self.root / self.templates_dir
