"""Custom completer for the DFS CLI with file and node id autocompletion."""

from pathlib import Path
from typing import Callable, Iterable, List, Optional

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, NODE_COMMANDS, STORED_FILE_COMMANDS


class DFSCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file completion for 'upload' from the source directory
    - Stored filename completion for 'download' and 'delete'
    - Node id completion for 'fail' and 'recover'
    """

    def __init__(
        self,
        source_root: Optional[Path] = None,
        stored_files: Optional[Callable[[], List[str]]] = None,
        node_ids: Optional[Callable[[], List[int]]] = None
    ):
        self.source_root = source_root
        self.stored_files = stored_files
        self.node_ids = node_ids

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        Only the first argument of a command is completed.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        argument_index = len(tokens) if is_typing_new_token else len(tokens) - 1
        if argument_index != 1:
            return

        command = tokens[0].lower()
        current_word = "" if is_typing_new_token else tokens[-1]

        if command == "upload":
            yield from self._complete_from(self._source_files(), current_word)
        elif command in STORED_FILE_COMMANDS and self.stored_files is not None:
            yield from self._complete_from(self.stored_files(), current_word)
        elif command in NODE_COMMANDS and self.node_ids is not None:
            yield from self._complete_from([str(n) for n in self.node_ids()], current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_from(self, candidates: Iterable[str], partial: str) -> Iterable[Completion]:
        for candidate in sorted(candidates):
            if candidate.startswith(partial):
                yield Completion(candidate, start_position=-len(partial))

    def _source_files(self) -> List[str]:
        """Regular files directly inside the source directory."""
        root = self.source_root if self.source_root is not None else Path.cwd()
        if not root.is_dir():
            return []
        return [item.name for item in root.iterdir() if item.is_file()]
