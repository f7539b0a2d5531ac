"""Configuration stages: pure transformations over ProjectConfiguration."""

from .config_stages import (
    PROVISIONAL_ENTRY_NAMES,
    init_config,
    merge_dependencies,
    add_tool,
    add_agent,
    add_workflow,
    set_entry_point,
    validate_config,
    load_config,
    load_config_file,
    dump_config,
)

__all__ = [
    "PROVISIONAL_ENTRY_NAMES",
    "init_config",
    "merge_dependencies",
    "add_tool",
    "add_agent",
    "add_workflow",
    "set_entry_point",
    "validate_config",
    "load_config",
    "load_config_file",
    "dump_config",
]
