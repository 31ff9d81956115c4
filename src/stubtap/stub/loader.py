"""
StubTap Stub Loader

Loads stub definition files from a directory tree into a StubRepository.

Every regular file is treated as a stub definition (JSON, or YAML for
.yaml/.yml files). Unreadable directories, unreadable files and malformed
definitions are logged and skipped so one bad file never aborts the load.
"""

import logging
from pathlib import Path
from typing import Union

from ..common import StubFileParser
from .models import Stub
from .repository import StubRepository


class StubLoader:
    """
    Recursive stub directory loader.

    Example:
        repo = StubRepository()
        loaded = StubLoader(repo).load_directory('stubs/')
        print(f"Loaded {loaded} stubs")
    """

    def __init__(self, repository: StubRepository):
        """
        Initialize loader.

        Args:
            repository: Repository that receives parsed stubs
        """
        self.repository = repository
        self.logger = logging.getLogger("stubtap.stub.loader")
        self.skipped_files = 0

    def load_directory(self, path: Union[str, Path]) -> int:
        """
        Walk a directory and register every stub found.

        Entries are visited in sorted order so registration order (and
        therefore lookup priority) is stable across runs.

        Args:
            path: Root directory of stub definitions

        Returns:
            Number of stubs registered
        """
        root = Path(path)
        if not root.is_dir():
            self.logger.warning(f"Can't read stub from {root}. Not a directory")
            return 0

        loaded = self._load_tree(root)
        self.logger.info(f"Loaded {loaded} stubs from {root} ({self.skipped_files} files skipped)")
        return loaded

    def _load_tree(self, directory: Path) -> int:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            self.logger.warning(f"Can't read stub from {directory}. {e}")
            return 0

        loaded = 0
        for entry in entries:
            if entry.is_dir():
                loaded += self._load_tree(entry)
            elif entry.is_file():
                loaded += self.load_file(entry)

        return loaded

    def load_file(self, path: Union[str, Path]) -> int:
        """
        Register the stubs defined in one file.

        Args:
            path: Stub definition file

        Returns:
            Number of stubs registered from the file (0 if skipped)
        """
        try:
            definitions = StubFileParser(str(path)).load()
        except (OSError, UnicodeDecodeError, ValueError) as e:
            self.logger.warning(f"Error when reading file {path}. {e}. skipping...")
            self.skipped_files += 1
            return 0

        loaded = 0
        for definition in definitions:
            try:
                stub = Stub.from_dict(definition)
            except ValueError as e:
                self.logger.warning(f"Invalid stub definition in {path}. {e}. skipping...")
                continue

            self.repository.register(stub)
            loaded += 1

        return loaded
