# git_graph_data.py

from datetime import datetime
from enum import Enum
from typing import Optional, Sequence, Union

Timestamp = Union[datetime, int, float]


class ConnectionType(Enum):
    DIRECT = "direct"
    MERGE = "merge"
    EXTENSION = "extension"  # parent lies outside the loaded history window


class ChildKind(Enum):
    BRANCH = "branch"  # child's primary parent is this commit
    MERGE = "merge"  # child references this commit as a secondary parent


class CommitRecord:
    """A commit as delivered by the history query: hash, ordered parents, timestamp."""

    __slots__ = ("hash", "parent_hashes", "timestamp")

    def __init__(self, hash: str, parent_hashes: Sequence[str] = (), timestamp: Timestamp = 0):
        self.hash: str = hash
        self.parent_hashes: tuple[str, ...] = tuple(parent_hashes)
        self.timestamp: Timestamp = timestamp

    def __repr__(self) -> str:
        return (
            f"CommitRecord(hash='{self.hash[:7]}', "
            f"parents={[p[:7] for p in self.parent_hashes]}, "
            f"timestamp={self.timestamp!r})"
        )


class ChildLink:
    __slots__ = ("hash", "kind")

    def __init__(self, hash: str, kind: ChildKind):
        self.hash: str = hash
        self.kind: ChildKind = kind

    def __repr__(self) -> str:
        return f"ChildLink('{self.hash[:7]}', {self.kind.value})"


class GraphCommit:
    """A commit placed on the graph: its row, lane and lane color."""

    def __init__(
        self, record: CommitRecord, row: int, column: int, color: str, retained_parent_hashes: Sequence[str]
    ):
        self.record: CommitRecord = record
        self.row: int = row
        self.column: int = column
        self.color: str = color
        self.retained_parent_hashes: list[str] = list(retained_parent_hashes)

    @property
    def hash(self) -> str:
        return self.record.hash

    @property
    def is_merge(self) -> bool:
        return len(self.retained_parent_hashes) > 1

    def __repr__(self) -> str:
        return (
            f"GraphCommit(hash='{self.hash[:7]}', row={self.row}, column={self.column}, "
            f"color='{self.color}', parents={[p[:7] for p in self.retained_parent_hashes]})"
        )


class Connection:
    def __init__(
        self,
        source_row: int,
        source_column: int,
        target_row: int,
        target_column: int,
        type: ConnectionType,
        color: str,
    ):
        self.source_row: int = source_row
        self.source_column: int = source_column
        self.target_row: int = target_row
        self.target_column: int = target_column
        self.type: ConnectionType = type
        self.color: str = color

    def spans_row(self, row: int) -> bool:
        """True if the connector passes through `row` without ending on it."""
        low, high = sorted((self.source_row, self.target_row))
        return low < row < high

    def __repr__(self) -> str:
        return (
            f"Connection(({self.source_row}, {self.source_column}) -> "
            f"({self.target_row}, {self.target_column}), {self.type.value}, '{self.color}')"
        )


class GraphLayout:
    """Result of one layout pass. Owned by the caller; nothing is shared between passes."""

    def __init__(
        self,
        commits: Optional[list[GraphCommit]] = None,
        connections: Optional[list[Connection]] = None,
        extensions: Optional[list[Connection]] = None,
        column_count: int = 0,
    ):
        self.commits: list[GraphCommit] = commits or []
        self.connections: list[Connection] = connections or []
        self.extensions: list[Connection] = extensions or []
        self.column_count: int = column_count
        self._by_hash: dict[str, GraphCommit] = {c.hash: c for c in self.commits}

    def commit_for(self, commit_hash: str) -> Optional[GraphCommit]:
        return self._by_hash.get(commit_hash)

    def __len__(self) -> int:
        return len(self.commits)

    def __repr__(self) -> str:
        return (
            f"GraphLayout(commits={len(self.commits)}, connections={len(self.connections)}, "
            f"extensions={len(self.extensions)}, columns={self.column_count})"
        )
