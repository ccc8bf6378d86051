#!/usr/bin/env python3
"""
Git utilities

This module reads .gitignore files so the source scanner can skip build
output (bin/, obj/) and other ignored folders while walking a solution.
"""
import os
import logging
from typing import Dict, List, Optional

import pathspec

logger = logging.getLogger(__name__)


def parse_gitignore_file(gitignore_path: str) -> List[str]:
    """
    Parse a single .gitignore file and return its patterns.

    Empty lines and comments are skipped.

    Args:
        gitignore_path: Path to the .gitignore file

    Returns:
        List of patterns from the file

    Raises:
        OSError: If the file cannot be read
    """
    patterns = []
    with open(gitignore_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            patterns.append(line)
    logger.debug(f"Parsed {len(patterns)} patterns from {gitignore_path}")
    return patterns


def find_parent_gitignores(start_dir: str) -> Dict[str, List[str]]:
    """
    Find .gitignore files in the given directory and all of its parents.

    Args:
        start_dir: The starting directory path

    Returns:
        Dictionary mapping absolute directory paths to their gitignore patterns
    """
    gitignores: Dict[str, List[str]] = {}
    current_path = os.path.abspath(start_dir)

    while True:
        gitignore_path = os.path.join(current_path, ".gitignore")
        if os.path.isfile(gitignore_path):
            try:
                gitignores[current_path] = parse_gitignore_file(gitignore_path)
            except OSError as e:
                logger.warning(f"Error reading .gitignore at {gitignore_path}: {e}")

        parent_path = os.path.dirname(current_path)
        if parent_path == current_path:
            break
        current_path = parent_path

    return gitignores


class GitIgnoreMatcher:
    """
    Matches paths against every .gitignore that applies to them.

    Parent .gitignore files are loaded up front; nested ones are picked up
    through load_directory() as the scanner descends into the tree.
    """

    def __init__(self, root_dir: str) -> None:
        self.root_dir: str = os.path.abspath(root_dir)
        self.specs: Dict[str, pathspec.GitIgnoreSpec] = {}
        for directory, patterns in find_parent_gitignores(self.root_dir).items():
            self._add_spec(directory, patterns)

    def _add_spec(self, directory: str, patterns: List[str]) -> None:
        if patterns:
            self.specs[directory] = pathspec.GitIgnoreSpec.from_lines(patterns)
            logger.debug(f"Loaded {len(patterns)} ignore patterns for {directory}")

    @property
    def pattern_sources(self) -> int:
        return len(self.specs)

    def load_directory(self, directory: str) -> None:
        """Load the .gitignore file of a directory inside the scanned tree, if any."""
        directory = os.path.abspath(directory)
        if directory in self.specs:
            return
        gitignore_path = os.path.join(directory, ".gitignore")
        if not os.path.isfile(gitignore_path):
            return
        try:
            self._add_spec(directory, parse_gitignore_file(gitignore_path))
        except OSError as e:
            logger.warning(f"Error reading .gitignore at {gitignore_path}: {e}")

    def is_ignored(self, path: str, is_dir: Optional[bool] = None) -> bool:
        """
        Check if a path is ignored by any applicable .gitignore file.

        A path is ignored when a .gitignore in one of its ancestor directories
        matches it. Negations are honoured within a single .gitignore file.

        Args:
            path: The file or directory path to check
            is_dir: Whether the path is a directory; detected when omitted

        Returns:
            True if the path should be skipped
        """
        abs_path = os.path.abspath(path)
        if is_dir is None:
            is_dir = os.path.isdir(abs_path)

        for directory, spec in self.specs.items():
            if abs_path == directory or not abs_path.startswith(
                directory.rstrip(os.sep) + os.sep
            ):
                continue
            rel_path = os.path.relpath(abs_path, directory).replace("\\", "/")
            if is_dir:
                rel_path += "/"
            if spec.match_file(rel_path):
                return True

        return False
