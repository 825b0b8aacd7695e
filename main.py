import logging
import os
import sys

from git_graph_data import GraphLayout
from git_graph_layout import calculate_git_graph_layout
from git_manager import GitManager
from settings import settings


BEND_RATIO = 0.6  # connectors switch lanes 60% of the way down


def format_layout(layout: GraphLayout) -> list[str]:
    """Plain-text rendering of a layout: one line per row with its lane marks."""
    width = max(layout.column_count, 1)
    lines = []
    for commit in layout.commits:
        marks = [" "] * width
        for connection in layout.connections:
            if not connection.spans_row(commit.row):
                continue
            bend_row = connection.source_row + (connection.target_row - connection.source_row) * BEND_RATIO
            column = connection.source_column if commit.row < bend_row else connection.target_column
            marks[column] = "|"
        marks[commit.column] = "*"
        lines.append(f"{' '.join(marks)}  {commit.hash[:7]}  column={commit.column}")
    return lines


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    repo_path = argv[0] if argv else "."
    query = " ".join(argv[1:])

    git_manager = GitManager(repo_path)
    if not git_manager.initialize():
        logging.error("%s 不是 Git 仓库", repo_path)
        return 1

    limit = settings.get_history_limit()
    if query:
        records = git_manager.search_commit_records(query, limit=limit)
    else:
        records = git_manager.get_commit_records(limit=limit)

    layout = calculate_git_graph_layout(records, is_search_mode=bool(query), palette=settings.get_branch_colors())
    logging.info("布局完成：%d 个提交，%d 条分支线", len(layout), layout.column_count)
    for line in format_layout(layout):
        print(line)
    return 0


if __name__ == "__main__":
    # 根据环境变量设置日志级别
    log_level = logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO

    # 配置日志
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"
    )
    # add file handler
    if os.getenv("LOG_TO_FILE") == "1":
        file_handler = logging.FileHandler("commit_lanes.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s")
        )
        logging.getLogger().addHandler(file_handler)
    sys.exit(main())
