from typing import Optional, Sequence

from PyQt6.QtCore import QThread, pyqtSignal

from git_graph_data import CommitRecord
from git_graph_layout import calculate_git_graph_layout


class LayoutThread(QThread):
    """在后台计算提交图布局，避免大仓库阻塞界面"""

    finished = pyqtSignal(object)  # GraphLayout
    error = pyqtSignal(str)  # 错误信号

    def __init__(
        self,
        records: Sequence[CommitRecord],
        is_search_mode: bool = False,
        palette: Optional[Sequence[str]] = None,
        parent=None,
    ):
        super().__init__(parent)
        # 复制一份输入，调用方之后修改列表不影响布局
        self.records = list(records)
        self.is_search_mode = is_search_mode
        self.palette = list(palette) if palette else None

    def run(self):
        try:
            layout = calculate_git_graph_layout(self.records, self.is_search_mode, self.palette)
            self.finished.emit(layout)
        except Exception as e:
            self.error.emit(str(e))
