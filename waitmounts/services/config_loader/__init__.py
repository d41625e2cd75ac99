"""
Configuration Loader Module

Components:
- ConfigurationLoader: Merges flags, config file, prompts and defaults
- CliOptions: Raw command line values
- InteractivePrompter: Rich prompts for interactive mode
- config_file: key=value config file parsing and writing
"""

from .config_file import (
    parse_config_text,
    read_config_file,
    render_config,
    split_list_value,
    write_config_file,
)
from .config_loader import CliOptions, ConfigurationLoader
from .prompter import InteractivePrompter

__all__ = [
    "CliOptions",
    "ConfigurationLoader",
    "InteractivePrompter",
    "parse_config_text",
    "read_config_file",
    "render_config",
    "split_list_value",
    "write_config_file",
]
