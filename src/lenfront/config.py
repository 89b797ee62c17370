"""Frontend configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Upper bound for max_depth; each nesting level costs up to seven parser frames.
MAX_DEPTH_LIMIT = 100


@dataclass(frozen=True, slots=True)
class FrontendConfig:
    """Read-only options shared by the lexer and parser.

    keep_comments: emit COMMENT tokens instead of discarding comments.
    max_depth: deepest expression nesting the parser descends into before
    replacing the remainder with an error placeholder. Clamped to
    1..MAX_DEPTH_LIMIT.
    """

    keep_comments: bool = True
    max_depth: int = 64

    def __post_init__(self) -> None:
        clamped = min(max(self.max_depth, 1), MAX_DEPTH_LIMIT)
        if clamped != self.max_depth:
            object.__setattr__(self, "max_depth", clamped)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> FrontendConfig:
        """Build a config from a parsed lenfront.toml document.

        Unknown keys and values of the wrong type are ignored.
        """
        defaults = cls()
        keep_comments = defaults.keep_comments
        max_depth = defaults.max_depth

        cfg_lexer = config.get("lexer")
        if isinstance(cfg_lexer, dict):
            value = cfg_lexer.get("keep_comments")
            if isinstance(value, bool):
                keep_comments = value

        cfg_parser = config.get("parser")
        if isinstance(cfg_parser, dict):
            value = cfg_parser.get("max_depth")
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                max_depth = value

        return cls(keep_comments=keep_comments, max_depth=max_depth)


DEFAULT_CONFIG = FrontendConfig()
