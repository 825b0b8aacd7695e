import json
import logging
import os
from pathlib import Path

from git_graph_layout import BRANCH_COLORS

DEFAULT_GRAPH_SETTINGS = {
    "column_width": 20,
    "row_height": 56,
    "margin_left": 16,
    "margin_top": 20,
    "node_radius": 6,
    "merge_node_radius": 8,
}


class Settings:
    def __init__(self, config_dir=None):
        # 配置目录，可通过环境变量覆盖
        if config_dir is None:
            config_dir = os.getenv("COMMIT_LANES_CONFIG_DIR") or os.path.join(str(Path.home()), ".commit_lanes")
        self.config_dir = config_dir
        if not os.path.exists(self.config_dir):
            os.makedirs(self.config_dir)

        self.config_file = os.path.join(self.config_dir, "settings.json")

        # 默认设置
        self.settings = {
            "branch_colors": list(BRANCH_COLORS),  # 分支颜色
            "history_limit": 500,  # 每次读取的最大提交数
            "graph": dict(DEFAULT_GRAPH_SETTINGS),  # 图形尺寸
        }

        self.load_settings()

    def load_settings(self):
        """加载设置"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, "r", encoding="utf-8") as f:
                    saved_settings = json.load(f)
                if isinstance(saved_settings, dict):
                    self.settings.update(saved_settings)
                else:
                    logging.warning(f"加载设置失败：配置文件不是 JSON 对象 {self.config_file}")
        except (OSError, ValueError) as e:
            logging.warning(f"加载设置失败：{e!s}")

    def save_settings(self):
        """保存设置"""
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logging.warning(f"保存设置失败：{e!s}")

    def get_branch_colors(self):
        """获取分支颜色，配置无效时使用默认调色板"""
        colors = self.settings.get("branch_colors")
        if not isinstance(colors, list) or not colors or not all(isinstance(c, str) for c in colors):
            return list(BRANCH_COLORS)
        return list(colors)

    def set_branch_colors(self, colors):
        self.settings["branch_colors"] = list(colors)
        self.save_settings()

    def get_history_limit(self):
        return self.settings.get("history_limit", 500)

    def set_history_limit(self, limit):
        self.settings["history_limit"] = limit
        self.save_settings()

    def get_graph_settings(self):
        """获取图形尺寸设置，缺失的键使用默认值"""
        graph = dict(DEFAULT_GRAPH_SETTINGS)
        saved = self.settings.get("graph")
        if isinstance(saved, dict):
            graph.update(saved)
        return graph

    def get_graph_setting(self, name):
        return self.get_graph_settings().get(name)

    def save_graph_settings(self, graph_settings):
        """保存图形尺寸设置"""
        graph = self.get_graph_settings()
        graph.update(graph_settings)
        self.settings["graph"] = graph
        self.save_settings()


# 创建全局settings实例
settings = Settings()
