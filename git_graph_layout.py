# git_graph_layout.py

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from git_graph_data import (
    ChildKind,
    ChildLink,
    CommitRecord,
    Connection,
    ConnectionType,
    GraphCommit,
    GraphLayout,
)

# Colors for different branches
BRANCH_COLORS = [
    "#3b82f6",  # blue
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",  # violet
    "#06b6d4",  # cyan
    "#f97316",  # orange
    "#84cc16",  # lime
    "#ec4899",  # pink
    "#6366f1",  # indigo
]


def calculate_git_graph_layout(
    records: Iterable[CommitRecord], is_search_mode: bool = False, palette: Optional[Sequence[str]] = None
) -> GraphLayout:
    """
    Lays out a batch of commits as a `git log --graph` style DAG.

    Every call works on its own lookup tables, so the result depends on the input only.
    In search mode the records are treated as a disconnected result set: everything goes
    to column 0 and only parent links that survive inside the set are connected.
    """
    palette = _resolve_palette(palette)
    commits, retained = normalize_commits(records)
    if not commits:
        return GraphLayout()

    if is_search_mode:
        graph_commits = create_search_layout(commits, retained, palette)
        return GraphLayout(graph_commits, calculate_connections(graph_commits), [], 1)

    # Step 1: temporal topological sort (newest first, children before parents)
    children = build_children_map(commits, retained)
    sorted_commits = temporal_topological_sort(commits, children)

    # Step 2: classify children as branch or merge children
    child_links = build_commit_graph(sorted_commits, retained, children)

    # Step 3: assign columns using the straight branches algorithm
    graph_commits, column_count = assign_columns(sorted_commits, retained, child_links, palette)

    connections = calculate_connections(graph_commits)
    extensions = calculate_extension_connections(graph_commits)
    logging.debug(
        "Graph layout: %d commits, %d connections, %d extensions, %d lanes",
        len(graph_commits),
        len(connections),
        len(extensions),
        column_count,
    )
    return GraphLayout(graph_commits, connections, extensions, column_count)


def _resolve_palette(palette: Optional[Sequence[str]]) -> list[str]:
    if not palette:
        return list(BRANCH_COLORS)
    return list(palette)


def _timestamp_value(timestamp) -> float:
    """Seconds since the epoch for a datetime, a number or an ISO 8601 string; 0 if unreadable."""
    try:
        if isinstance(timestamp, datetime):
            return timestamp.timestamp()
        if isinstance(timestamp, str):
            try:
                return datetime.fromisoformat(timestamp.strip().replace("Z", "+00:00")).timestamp()
            except ValueError:
                pass
        return float(timestamp)
    except (TypeError, ValueError, OverflowError):
        logging.debug("Unreadable commit timestamp %r, sorting it as the oldest", timestamp)
        return 0.0


def _newest_first(commits: Sequence[CommitRecord]) -> list[CommitRecord]:
    # sorted() is stable with reverse=True, equal timestamps keep their input order
    return sorted(commits, key=lambda c: _timestamp_value(c.timestamp), reverse=True)


def normalize_commits(records: Iterable[CommitRecord]) -> tuple[list[CommitRecord], dict[str, list[str]]]:
    """
    Drops duplicate and malformed records and works out which parents are inside the batch.

    Returns the surviving records in input order and a hash -> retained parent hashes map.
    The records' own `parent_hashes` are left as they are.
    """
    commits: list[CommitRecord] = []
    seen: set[str] = set()
    duplicates = 0
    malformed = 0

    for record in records:
        if not record.hash or not record.hash.strip():
            malformed += 1
            continue
        if record.hash in seen:
            duplicates += 1
            continue
        seen.add(record.hash)
        commits.append(record)

    retained: dict[str, list[str]] = {}
    dropped_parents = 0
    for commit in commits:
        kept: list[str] = []
        for parent_hash in commit.parent_hashes:
            if not parent_hash or not parent_hash.strip() or parent_hash in kept:
                continue
            if parent_hash == commit.hash or parent_hash not in seen:
                dropped_parents += 1
                continue
            kept.append(parent_hash)
        retained[commit.hash] = kept

    if duplicates or malformed or dropped_parents:
        logging.debug(
            "Normalized %d commits: %d duplicates, %d malformed records, %d parents outside the batch",
            len(commits),
            duplicates,
            malformed,
            dropped_parents,
        )
    return commits, retained


def build_children_map(commits: Sequence[CommitRecord], retained: dict[str, list[str]]) -> dict[str, list[str]]:
    """Inverse of the retained parent links; children are listed in input order."""
    children: dict[str, dict[str, None]] = {commit.hash: {} for commit in commits}
    for commit in commits:
        for parent_hash in retained[commit.hash]:
            children[parent_hash][commit.hash] = None
    return {commit_hash: list(kids) for commit_hash, kids in children.items()}


def temporal_topological_sort(
    commits: Sequence[CommitRecord], children: dict[str, list[str]]
) -> list[CommitRecord]:
    """
    Orders commits children-first while keeping recently active branches together.

    Seeds are taken newest first; from each unexplored seed a depth-first walk visits all
    children before emitting the commit itself. Uses an explicit stack so long linear
    histories do not hit the recursion limit. A child that is already explored (including
    one still on the stack, which only happens with cyclic input) is skipped.
    """
    commit_map = {commit.hash: commit for commit in commits}
    explored: set[str] = set()
    on_stack: set[str] = set()
    result: list[CommitRecord] = []
    cyclic_edges = 0

    for seed in _newest_first(commits):
        if seed.hash in explored:
            continue
        explored.add(seed.hash)
        on_stack.add(seed.hash)
        stack = [(seed.hash, iter(children.get(seed.hash, ())))]

        while stack:
            commit_hash, pending = stack[-1]
            for child_hash in pending:
                if child_hash in on_stack:
                    cyclic_edges += 1
                if child_hash not in explored:
                    explored.add(child_hash)
                    on_stack.add(child_hash)
                    stack.append((child_hash, iter(children.get(child_hash, ()))))
                    break
            else:
                stack.pop()
                on_stack.discard(commit_hash)
                result.append(commit_map[commit_hash])

    if cyclic_edges:
        logging.warning("Commit graph contains %d cyclic parent links, they were ignored", cyclic_edges)
    return result


def build_commit_graph(
    sorted_commits: Sequence[CommitRecord], retained: dict[str, list[str]], children: dict[str, list[str]]
) -> dict[str, list[ChildLink]]:
    """Tags every child of every commit as a branch child or a merge child."""
    child_links: dict[str, list[ChildLink]] = {}
    for commit in sorted_commits:
        links = []
        for child_hash in children.get(commit.hash, ()):
            child_parents = retained[child_hash]
            if child_parents and child_parents[0] == commit.hash:
                links.append(ChildLink(child_hash, ChildKind.BRANCH))
            else:
                links.append(ChildLink(child_hash, ChildKind.MERGE))
        child_links[commit.hash] = links
    return child_links


class ColorAllocator:
    """Hands out palette colors to lanes in the order the lanes are first used."""

    def __init__(self, palette: Sequence[str]):
        self.palette = list(palette)
        self.column_colors: dict[int, str] = {}
        self.allocated = 0

    def color_for(self, column: int) -> str:
        color = self.column_colors.get(column)
        if color is None:
            color = self.palette[self.allocated % len(self.palette)]
            self.column_colors[column] = color
            self.allocated += 1
        return color


def compute_forbidden_columns(
    merge_children: Sequence[str],
    current_row: int,
    commit_rows: dict[str, int],
    active_branches: Sequence[Optional[str]],
    column_last_row: dict[int, int],
) -> set[int]:
    """
    Columns a commit may not continue in because another lane was drawn there
    between its nearest merge child and itself.

    This is the simplified check: a lane that was freed and reopened inside the span
    is not looked at, so deeply diverged histories can still overlap now and then.
    """
    forbidden: set[int] = set()
    if not merge_children:
        return forbidden

    min_merge_child_row = min(commit_rows[child_hash] for child_hash in merge_children)

    # Rows are assigned in increasing order, so a column saw a commit inside
    # [min_merge_child_row, current_row) iff its latest commit is at or below the span start.
    for column, occupant in enumerate(active_branches):
        if occupant is None:
            continue
        last_row = column_last_row.get(column)
        if last_row is not None and min_merge_child_row <= last_row < current_row:
            forbidden.add(column)
    return forbidden


def _first_free_column(active_branches: list[Optional[str]]) -> int:
    return next((i for i, occupant in enumerate(active_branches) if occupant is None), len(active_branches))


def assign_columns(
    sorted_commits: Sequence[CommitRecord],
    retained: dict[str, list[str]],
    child_links: dict[str, list[ChildLink]],
    palette: Sequence[str],
) -> tuple[list[GraphCommit], int]:
    """Places each commit in a lane, keeping branches straight where it is safe to."""
    # List of active branches (None means available)
    active_branches: list[Optional[str]] = []
    commit_to_column: dict[str, int] = {}
    column_last_row: dict[int, int] = {}
    commit_rows = {commit.hash: row for row, commit in enumerate(sorted_commits)}
    colors = ColorAllocator(palette)

    result: list[GraphCommit] = []
    for row, commit in enumerate(sorted_commits):
        links = child_links.get(commit.hash, [])
        branch_children = [link.hash for link in links if link.kind is ChildKind.BRANCH]
        merge_children = [link.hash for link in links if link.kind is ChildKind.MERGE]

        forbidden = compute_forbidden_columns(merge_children, row, commit_rows, active_branches, column_last_row)

        # Try to continue in a branch child's column if possible
        candidate_columns = [
            commit_to_column[child_hash]
            for child_hash in branch_children
            if child_hash in commit_to_column and commit_to_column[child_hash] not in forbidden
        ]

        if candidate_columns:
            column = min(candidate_columns)
            active_branches[column] = commit.hash
        else:
            column = _first_free_column(active_branches)
            if column == len(active_branches):
                active_branches.append(commit.hash)
            else:
                active_branches[column] = commit.hash

        color = colors.color_for(column)
        commit_to_column[commit.hash] = column
        column_last_row[column] = row

        # The other branch children end their lanes here
        for child_hash in branch_children:
            child_column = commit_to_column.get(child_hash)
            if child_column is not None and child_column != column:
                active_branches[child_column] = None

        result.append(GraphCommit(commit, row, column, color, retained[commit.hash]))

    return result, len(active_branches)


def calculate_connections(graph_commits: Sequence[GraphCommit]) -> list[Connection]:
    """
    One connector per retained parent link.

    The primary parent gets a direct line in the child's color. Secondary parents get a
    merge line in the parent's color, so the line arrives in the color of the lane it joins.
    """
    commit_map = {commit.hash: commit for commit in graph_commits}
    connections: list[Connection] = []

    for commit in graph_commits:
        for index, parent_hash in enumerate(commit.retained_parent_hashes):
            parent = commit_map.get(parent_hash)
            if parent is None:
                continue
            if index == 0:
                connection_type, color = ConnectionType.DIRECT, commit.color
            else:
                connection_type, color = ConnectionType.MERGE, parent.color
            connections.append(
                Connection(commit.row, commit.column, parent.row, parent.column, connection_type, color)
            )
    return connections


def calculate_extension_connections(graph_commits: Sequence[GraphCommit]) -> list[Connection]:
    """Dangling lines for parents outside the batch, running past the last row in the commit's lane."""
    loaded = {commit.hash for commit in graph_commits}
    beyond_last_row = len(graph_commits) + 1
    extensions: list[Connection] = []

    for commit in graph_commits:
        missing: set[str] = set()
        for parent_hash in commit.record.parent_hashes:
            if not parent_hash or not parent_hash.strip() or parent_hash in loaded or parent_hash in missing:
                continue
            missing.add(parent_hash)
            extensions.append(
                Connection(
                    commit.row, commit.column, beyond_last_row, commit.column, ConnectionType.EXTENSION, commit.color
                )
            )
    return extensions


def create_search_layout(
    commits: Sequence[CommitRecord], retained: dict[str, list[str]], palette: Sequence[str]
) -> list[GraphCommit]:
    """Simplified layout for search results: newest first, all in column 0, one color."""
    used_color = palette[0]
    return [
        GraphCommit(commit, row, 0, used_color, retained[commit.hash])
        for row, commit in enumerate(_newest_first(commits))
    ]


if __name__ == "__main__":
    print("git_graph_layout.py - Contains logic for laying out the commit graph.")
