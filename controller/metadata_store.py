"""Durable filename -> replica node mapping, persisted as a line-oriented text file.

Each line holds one record: ``filename:id1,id2,id3,`` (ids in placement
order, trailing comma). Line order carries no meaning.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from common.logging_config import get_logger
from controller.exceptions import MetadataPersistenceError

logger = get_logger(__name__)


def format_record(filename: str, node_ids: Sequence[int]) -> str:
    """
    Render one record as a metadata line (without newline).

    Args:
        filename: Stored filename
        node_ids: Replica node ids in placement order

    Returns:
        Line such as ``a.txt:1,2,3,``
    """
    return f"{filename}:" + "".join(f"{node_id}," for node_id in node_ids)


def parse_record(line: str) -> Optional[Tuple[str, List[int]]]:
    """
    Parse one metadata line.

    Blank lines, lines without a colon, lines with a non-numeric id and
    lines with no ids yield None. Repeated ids keep their first position.
    The split happens on the last colon, since ids never contain one.

    Returns:
        (filename, node_ids) or None if the line should be skipped
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None

    filename, colon, ids_part = line.rpartition(":")
    if not colon or not filename:
        return None

    node_ids: List[int] = []
    for token in ids_part.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            node_id = int(token)
        except ValueError:
            return None
        if node_id not in node_ids:
            node_ids.append(node_id)

    if not node_ids:
        return None
    return filename, node_ids


class MetadataStore:
    """
    Loads and saves the filename -> node ids mapping.

    No locking is done here; the replication engine serialises access.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, List[int]]:
        """
        Read the mapping from disk.

        A missing file yields an empty mapping. Malformed lines are skipped.

        Raises:
            MetadataPersistenceError: If the file exists but cannot be read
        """
        if not self.path.exists():
            logger.debug(f"No metadata file at {self.path}, starting empty")
            return {}

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise MetadataPersistenceError(f"Failed to load metadata from {self.path}: {e}") from e

        mapping: Dict[str, List[int]] = {}
        skipped = 0
        for line in text.splitlines():
            if not line.strip():
                continue
            parsed = parse_record(line)
            if parsed is None:
                skipped += 1
                continue
            filename, node_ids = parsed
            mapping[filename] = node_ids

        if skipped:
            logger.warning(f"Skipped {skipped} malformed metadata line(s) in {self.path}")
        logger.info(f"Metadata loaded from disk: {len(mapping)} file record(s)")
        return mapping

    def save(self, mapping: Mapping[str, Sequence[int]]) -> None:
        """
        Overwrite the metadata file with the given mapping.

        The file is written to a temporary sibling and moved into place, so
        a reader sees either the previous or the new contents.

        Raises:
            MetadataPersistenceError: If the file cannot be written
        """
        lines = [format_record(name, mapping[name]) + "\n" for name in sorted(mapping)]

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.writelines(lines)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise MetadataPersistenceError(f"Failed to save metadata to {self.path}: {e}") from e

        logger.debug(f"Saved {len(lines)} metadata record(s) to {self.path}")
