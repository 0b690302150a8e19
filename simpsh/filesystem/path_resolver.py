"""
Path Resolver Module

Locates an executable by name in the colon-separated search path.

Version: 1.0.0
"""

import os
from typing import List

from simpsh.exceptions import CommandNotFoundError, PathResolutionError
from simpsh.logger import get_logger
from simpsh.shell.parser import CommandParser


class PathResolver:
    """
    Resolves bare command names against a search path.

    Handles:
    - Splitting the search path with the tokenizer's splitting logic
    - Exact name matching against directory entries, in path order
    - Failing loudly on a directory that cannot be enumerated
    """

    _logger = get_logger('path_resolver')

    @staticmethod
    def is_searchable(name: str) -> bool:
        """
        Check whether a name qualifies for a search path lookup.

        Names containing a path separator or starting with '.' are used
        as given.
        """
        return bool(name) and '/' not in name and not name.startswith('.')

    @staticmethod
    def split_search_path(search_path: str) -> List[str]:
        """
        Split a search path into its directories.

        Args:
            search_path: Colon-separated directories, e.g. "/usr/bin/:/bin"

        Returns:
            Directories in search order, empty entries dropped
        """
        return CommandParser.split_words(search_path, delim=':')

    @classmethod
    def resolve(cls, name: str, search_path: str) -> str:
        """
        Resolve a bare command name to a path.

        Each directory is enumerated in order and its entry names are
        compared with the target; the first match wins.

        Args:
            name: Bare command name
            search_path: Colon-separated directories

        Returns:
            The directory joined with the name

        Raises:
            PathResolutionError: If a directory cannot be opened; the
                search stops there instead of moving on
            CommandNotFoundError: If no directory holds the name
        """
        for directory in cls.split_search_path(search_path):
            try:
                with os.scandir(directory) as entries:
                    found = any(entry.name == name for entry in entries)
            except OSError as e:
                cls._logger.warning(
                    "Cannot enumerate search directory",
                    context={'directory': directory, 'error': e.strerror}
                )
                raise PathResolutionError(
                    name, directory, e.strerror or str(e)
                ) from e

            if found:
                path = os.path.join(directory, name)
                cls._logger.debug("Resolved command", context={'name': name, 'path': path})
                return path

        raise CommandNotFoundError(name, search_path=search_path)
