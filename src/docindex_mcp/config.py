"""Runtime configuration for the docindex MCP server."""

from dataclasses import dataclass
import logging
import os

from docindex_mcp.index.kinds import DEFAULT_POLICY, RankingPolicy

logger = logging.getLogger("docindex-mcp.config")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, separator: str = ",") -> tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(separator) if part.strip())


@dataclass(frozen=True)
class DocIndexConfig:
    index_paths: tuple[str, ...]
    kind_order: tuple[str, ...]
    log_level: str
    strict: bool

    def ranking_policy(self) -> RankingPolicy:
        """Kind priority policy; falls back to the default on unknown kind names."""
        if not self.kind_order:
            return DEFAULT_POLICY
        try:
            return RankingPolicy.from_order(self.kind_order)
        except ValueError as exc:
            logger.warning("Ignoring DOCINDEX_KIND_ORDER: %s", exc)
            return DEFAULT_POLICY


def get_config() -> DocIndexConfig:
    """Load config from environment variables."""
    return DocIndexConfig(
        index_paths=_env_list("DOCINDEX_PATHS", os.pathsep),
        kind_order=_env_list("DOCINDEX_KIND_ORDER"),
        log_level=os.getenv("DOCINDEX_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        strict=_env_bool("DOCINDEX_STRICT", True),
    )
