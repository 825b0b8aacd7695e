# git_graph_geometry.py

from typing import Optional

from git_graph_data import GraphCommit, GraphLayout
from settings import DEFAULT_GRAPH_SETTINGS, settings

LABEL_GAP = 16
EMPTY_GRAPH_SIZE = (200, 100)


class GraphGeometry:
    """Pixel metrics a renderer uses to place the laid-out graph."""

    def __init__(
        self,
        column_width: int = 20,
        row_height: int = 56,
        margin_left: int = 16,
        margin_top: int = 20,
        node_radius: int = 6,
        merge_node_radius: int = 8,
    ):
        self.column_width = column_width
        self.row_height = row_height
        self.margin_left = margin_left
        self.margin_top = margin_top
        self.node_radius = node_radius
        self.merge_node_radius = merge_node_radius

    @classmethod
    def from_settings(cls, app_settings=None) -> "GraphGeometry":
        graph = (app_settings or settings).get_graph_settings()
        return cls(**{name: graph[name] for name in DEFAULT_GRAPH_SETTINGS})

    def node_x(self, column: int) -> int:
        return column * self.column_width + self.margin_left + self.node_radius

    def node_y(self, row: int) -> int:
        return row * self.row_height + self.margin_top + self.node_radius

    def node_radius_for(self, commit: GraphCommit, selected: bool = False) -> int:
        radius = self.merge_node_radius if commit.is_merge else self.node_radius
        return radius + 2 if selected else radius

    def graph_dimensions(self, layout: GraphLayout) -> tuple[int, int]:
        if not layout.commits:
            return EMPTY_GRAPH_SIZE
        max_column = max((commit.column for commit in layout.commits), default=0)
        width = (max_column + 1) * self.column_width + self.margin_left * 2
        height = len(layout.commits) * self.row_height + self.margin_top * 2
        return width, height

    def label_offsets(self, layout: GraphLayout, gap: Optional[int] = None) -> list[int]:
        """
        X position where each row's text may start.

        The text has to clear the row's own node and every connector passing through the
        row, so it starts past the rightmost of those.
        """
        gap = LABEL_GAP if gap is None else gap
        offsets = []
        for commit in layout.commits:
            rightmost = self.node_x(commit.column)
            for connection in layout.connections + layout.extensions:
                if connection.spans_row(commit.row):
                    rightmost = max(
                        rightmost, self.node_x(connection.source_column), self.node_x(connection.target_column)
                    )
            offsets.append(rightmost + gap)
        return offsets
