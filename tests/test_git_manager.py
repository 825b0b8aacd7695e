import unittest
import tempfile
import shutil
import os
import git # Make sure 'gitpython' is installed in the test environment

import sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from git_graph_data import ConnectionType
from git_graph_layout import calculate_git_graph_layout
from git_manager import GitManager


class TestGitManagerHistory(unittest.TestCase):
    def setUp(self):
        self.repo_path = tempfile.mkdtemp()
        self.repo = git.Repo.init(self.repo_path)
        with self.repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        # main: root -> second ; feature: root -> feature work ; then merge feature into main
        self.root = self._commit("base.txt", "Initial commit")
        self.main_branch = self.repo.active_branch.name

        feature = self.repo.create_head("feature")
        feature.checkout()
        self.feature_commit = self._commit("feature.txt", "Add feature work")

        self.repo.heads[self.main_branch].checkout()
        self.second = self._commit("main.txt", "Second commit on main")
        self.merge = self.repo.index.commit(
            "Merge branch 'feature'", parent_commits=(self.second, self.feature_commit)
        )

        self.git_manager = GitManager(self.repo_path)
        self.git_manager.initialize()

    def tearDown(self):
        shutil.rmtree(self.repo_path)

    def _commit(self, file_name, message):
        with open(os.path.join(self.repo_path, file_name), "w") as f:
            f.write(message)
        self.repo.index.add([file_name])
        return self.repo.index.commit(message)

    def test_initialize_non_repo(self):
        not_a_repo = tempfile.mkdtemp()
        try:
            self.assertFalse(GitManager(not_a_repo).initialize())
        finally:
            shutil.rmtree(not_a_repo)
        self.assertFalse(GitManager(os.path.join(not_a_repo, "missing")).initialize())

    def test_uninitialized_manager_returns_nothing(self):
        manager = GitManager(self.repo_path)
        self.assertEqual(manager.get_commit_records(), [])
        self.assertEqual(manager.search_commit_records("feature"), [])
        self.assertEqual(manager.get_branches(), [])

    def test_branches(self):
        self.assertEqual(sorted(self.git_manager.get_branches()), sorted([self.main_branch, "feature"]))

    def test_commit_records(self):
        records = self.git_manager.get_commit_records()
        by_hash = {r.hash: r for r in records}

        self.assertEqual(len(records), 4)
        self.assertEqual(by_hash[self.merge.hexsha].parent_hashes, (self.second.hexsha, self.feature_commit.hexsha))
        self.assertEqual(by_hash[self.root.hexsha].parent_hashes, ())
        self.assertEqual(by_hash[self.merge.hexsha].timestamp, self.merge.committed_datetime)

    def test_limit_truncates_history(self):
        records = self.git_manager.get_commit_records(revs=[self.main_branch], limit=2)
        self.assertEqual(len(records), 2)

        layout = calculate_git_graph_layout(records)
        self.assertEqual(len(layout), 2)
        # Parents outside the window show up as extensions, not as connections
        self.assertEqual(len(layout.connections), 1)
        self.assertEqual(len(layout.extensions), 2)

    def test_layout_of_repository_history(self):
        layout = calculate_git_graph_layout(self.git_manager.get_commit_records())

        merge = layout.commit_for(self.merge.hexsha)
        second = layout.commit_for(self.second.hexsha)
        root = layout.commit_for(self.root.hexsha)
        self.assertEqual(merge.row, 0)
        self.assertEqual(root.row, 3)
        self.assertEqual(merge.column, second.column)

        merge_lines = [c for c in layout.connections if c.type is ConnectionType.MERGE]
        self.assertEqual(len(merge_lines), 1)
        self.assertEqual(merge_lines[0].color, layout.commit_for(self.feature_commit.hexsha).color)

    def test_search_records(self):
        records = self.git_manager.search_commit_records("FEATURE")
        hashes = {r.hash for r in records}
        self.assertEqual(hashes, {self.feature_commit.hexsha, self.merge.hexsha})

        layout = calculate_git_graph_layout(records, is_search_mode=True)
        self.assertTrue(all(c.column == 0 for c in layout.commits))
        # Only the merge's second parent is in the result set, which makes it the primary retained one
        self.assertEqual(len(layout.connections), 1)
        self.assertIs(layout.connections[0].type, ConnectionType.DIRECT)


if __name__ == "__main__":
    unittest.main()
