"""
Traversal result types and assembly
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List


@dataclass(frozen=True)
class FileRecord:
    """Content of one collected file"""
    relative_path: str
    content: bytes

    @property
    def text(self) -> str:
        """Content decoded as UTF-8, undecodable bytes replaced"""
        return self.content.decode('utf-8', errors='replace')

    def to_dict(self) -> Dict[str, str]:
        return {
            'relative_path': self.relative_path,
            'content': self.text,
        }


@dataclass
class TraversalResult:
    """Tree listing plus the collected files, in no particular order"""
    tree: str = ""
    files: List[FileRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tree': self.tree,
            'files': [record.to_dict() for record in self.files],
        }

    def paths(self) -> List[str]:
        return [record.relative_path for record in self.files]


def assemble_result(tree: str, records: Iterable[FileRecord]) -> TraversalResult:
    """Combine a rendered tree and collected records into one result"""
    return TraversalResult(tree=tree, files=list(records))
