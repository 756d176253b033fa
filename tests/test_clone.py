"""Tests for git remote parsing and clone directory naming."""

from __future__ import annotations

import unittest
from datetime import date

from trypick.clone import GitRemote, clone_directory_name, is_git_uri, parse_git_uri
from trypick.errors import GitRemoteError

TODAY = date(2026, 10, 17)


class ParseGitUriTests(unittest.TestCase):
    def test_https_and_ssh_remotes(self) -> None:
        cases = [
            ("https://github.com/tobi/try", GitRemote("github.com", "tobi", "try")),
            ("https://github.com/tobi/try.git", GitRemote("github.com", "tobi", "try")),
            ("git@github.com:tobi/try.git", GitRemote("github.com", "tobi", "try")),
            ("https://gitlab.com/group/tool", GitRemote("gitlab.com", "group", "tool")),
            ("git@git.example.org:team/app", GitRemote("git.example.org", "team", "app")),
        ]
        for uri, expected in cases:
            self.assertEqual(parse_git_uri(uri), expected, uri)

    def test_unparseable_remotes(self) -> None:
        for uri in ["github.com/tobi/try", "https://github.com/tobi", "not a url"]:
            self.assertIsNone(parse_git_uri(uri), uri)


class IsGitUriTests(unittest.TestCase):
    def test_recognizes_remote_shapes(self) -> None:
        for text in ["https://x.org/a/b", "git@host:a/b", "github.com/a/b", "gitlab.com/a", "repo.git"]:
            self.assertTrue(is_git_uri(text), text)

    def test_plain_queries_are_not_remotes(self) -> None:
        for text in ["alpha", "my-project", "", None]:
            self.assertFalse(is_git_uri(text), text)


class CloneDirectoryNameTests(unittest.TestCase):
    def test_dated_user_repo_name(self) -> None:
        name = clone_directory_name("https://github.com/tobi/try.git", today=TODAY)
        self.assertEqual(name, "2026-10-17-tobi-try")

    def test_custom_name_wins(self) -> None:
        self.assertEqual(clone_directory_name("https://github.com/tobi/try", "my fork"), "my-fork")

    def test_unparseable_uri_raises(self) -> None:
        with self.assertRaises(GitRemoteError):
            clone_directory_name("github.com/tobi/try", today=TODAY)


if __name__ == "__main__":
    unittest.main()
