from __future__ import annotations

__all__ = [
    "Templates",
    "create_environment",
    "parse_home_entries",
    "parse_page_blocks",
    "write_default_templates",
]

# Re-export primary functions from submodules (explicit alias)
from .source import parse_home_entries as parse_home_entries
from .source import parse_page_blocks as parse_page_blocks
from .templating import Templates as Templates
from .templating import create_environment as create_environment
from .templating import write_default_templates as write_default_templates
