import logging
from typing import List, Optional

import git
import git.exc
from git import GitCommandError

from git_graph_data import CommitRecord


class GitManager:
    """Read-only history queries that feed the graph layout."""

    def __init__(self, repo_path: str):
        self.repo_path = repo_path
        self.repo: Optional[git.Repo] = None

    def initialize(self) -> bool:
        """初始化 Git 仓库"""
        try:
            self.repo = git.Repo(self.repo_path)
            return True
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            return False

    def get_branches(self) -> List[str]:
        """获取所有分支"""
        if not self.repo:
            return []
        return [branch.name for branch in self.repo.branches]

    def get_remote_branches(self) -> List[str]:
        """获取所有远程分支的完整名称（例如 'origin/main'）"""
        if not self.repo:
            return []
        remote_branches = []
        for remote in self.repo.remotes:
            for ref in remote.refs:
                remote_branches.append(ref.name)
        return remote_branches

    def _resolve_revs(self, revs: Optional[List[str]], include_remotes: bool) -> List[str]:
        resolved = list(revs or [])
        if include_remotes:
            resolved.extend(self.get_remote_branches())
        if not resolved:
            # 没有指定分支时使用所有本地分支，空仓库则为空
            resolved = [head.name for head in self.repo.heads]
        return resolved

    def get_commit_records(
        self, revs: Optional[List[str]] = None, limit: int = 500, skip: int = 0, include_remotes: bool = False
    ) -> List[CommitRecord]:
        """获取提交历史，用于图形布局

        参数：
            revs: 要获取历史的分支或提交（默认为所有本地分支）
            limit: 返回的最大提交数量（默认为 500）
            skip: 跳过的提交数量（默认为 0）
            include_remotes: 是否包含远程分支的提交（默认为 False）
        """
        if not self.repo:
            return []

        revs = self._resolve_revs(revs, include_remotes)
        if not revs:
            return []

        try:
            return [
                self._to_record(commit) for commit in self.repo.iter_commits(revs, max_count=limit, skip=skip)
            ]
        except GitCommandError:
            logging.exception("获取提交历史失败：%s", revs)
            return []

    def search_commit_records(self, query: str, limit: int = 500) -> List[CommitRecord]:
        """按提交信息搜索提交（git log --grep，忽略大小写），结果用于搜索模式布局"""
        if not self.repo or not query:
            return []

        revs = self._resolve_revs(None, include_remotes=False)
        if not revs:
            return []

        try:
            commits = self.repo.iter_commits(revs, max_count=limit, grep=query, regexp_ignore_case=True)
            return [self._to_record(commit) for commit in commits]
        except GitCommandError:
            logging.exception("搜索提交失败：%s", query)
            return []

    @staticmethod
    def _to_record(commit: git.Commit) -> CommitRecord:
        return CommitRecord(
            hash=commit.hexsha,
            parent_hashes=[parent.hexsha for parent in commit.parents],
            timestamp=commit.committed_datetime,
        )
