"""Tests for branch and commit conventions and the git-backed checks."""

import pytest

from devflow import sh
from devflow.checks import conventions
from devflow.checks.tools import clean_tree_step, git_commit_step
from devflow.git_facts import git as git_facts
from devflow.model import StepStatus
from devflow.runner import changed_paths, run_checklist

from .conftest import commit_file, git, requires_git


class TestBranchName:
    @pytest.mark.parametrize("branch", ["feat/login-form", "fix/issue-42", "docs/readme", "chore/bump_deps"])
    def test_accepts_conventional_branches(self, branch):
        assert conventions.validate_branch_name(branch) is None

    @pytest.mark.parametrize("branch", ["main", "master"])
    def test_rejects_protected_branches(self, branch):
        assert "protected branch" in conventions.validate_branch_name(branch)

    def test_rejects_detached_head(self):
        assert "detached" in conventions.validate_branch_name("HEAD")

    @pytest.mark.parametrize("branch", ["login-form", "feature/login", "feat/Login", "feat/"])
    def test_rejects_nonconforming_names(self, branch):
        assert "does not match" in conventions.validate_branch_name(branch)

    def test_custom_pattern_and_protected(self):
        assert conventions.validate_branch_name("JIRA-12-x", r"^[A-Z]+-\d+", ["trunk"]) is None
        assert conventions.validate_branch_name("trunk", r".*", ["trunk"]) is not None


class TestCommitSubject:
    @pytest.mark.parametrize(
        "subject",
        ["feat: add login form", "fix(api): handle empty body", "refactor!: drop py2 support", "ci(gh-actions): cache uv"],
    )
    def test_accepts_conventional_subjects(self, subject):
        assert conventions.validate_commit_subject(subject) is None

    @pytest.mark.parametrize("subject", ["Added login form", "feat add login", "feature: login", "fix:missing space"])
    def test_rejects_nonconforming_subjects(self, subject):
        assert "commit convention" in conventions.validate_commit_subject(subject)

    def test_rejects_long_subject(self):
        subject = "feat: " + "x" * 80
        assert "max 72" in conventions.validate_commit_subject(subject)

    def test_rejects_empty_subject(self):
        assert conventions.validate_commit_subject("   ") == "empty commit subject"


@requires_git
class TestGitChecks:
    def test_branch_check_on_feature_branch(self, git_repo):
        outcome = conventions.branch_name_check()(git_repo)
        assert outcome.ok
        assert outcome.message == "on branch feat/widget"

    def test_branch_check_on_main(self, git_repo):
        git(git_repo, "checkout", "-q", "main")
        outcome = conventions.branch_name_check()(git_repo)
        assert not outcome.ok

    def test_commit_check_falls_back_to_head_without_remote(self, git_repo):
        commit_file(git_repo, "a.txt", "a", "feat: add a")
        assert conventions.commit_message_check()(git_repo).ok

        commit_file(git_repo, "b.txt", "b", "added b")
        outcome = conventions.commit_message_check()(git_repo)
        assert not outcome.ok
        assert "added b" in outcome.message

    def test_commit_check_covers_every_branch_commit(self, git_repo):
        commit_file(git_repo, "a.txt", "a", "wip")
        commit_file(git_repo, "b.txt", "b", "feat: add b")
        outcome = conventions.commit_message_check(base_ref="main")(git_repo)
        assert not outcome.ok
        assert "'wip'" in outcome.message

    def test_commit_check_skips_branch_without_commits(self, git_repo):
        outcome = conventions.commit_message_check(base_ref="main")(git_repo)
        assert outcome.skip
        assert outcome.ok

    def test_clean_tree_check(self, git_repo):
        assert conventions.clean_tree_check()(git_repo).ok
        (git_repo / "scratch.py").write_text("print(1)\n")
        outcome = conventions.clean_tree_check()(git_repo)
        assert not outcome.ok
        assert "scratch.py" in outcome.message

    def test_commit_step_is_skipped_on_clean_tree(self, git_repo):
        step = git_commit_step("feat: nothing")
        run = run_checklist([step], repo_root=git_repo)
        assert run.statuses()["commit"] is StepStatus.SKIPPED
        assert run.green
        assert git_facts.last_commit_subject(git_repo) == "chore: initial commit"

    def test_commit_step_commits_staged_changes_then_skips(self, git_repo):
        (git_repo / "new.txt").write_text("new\n")
        git(git_repo, "add", "new.txt")

        first = run_checklist([git_commit_step("feat: add new file")], repo_root=git_repo)
        assert first.statuses()["commit"] is StepStatus.PASSED
        assert git_facts.last_commit_subject(git_repo) == "feat: add new file"

        second = run_checklist([git_commit_step("feat: add new file")], repo_root=git_repo)
        assert second.statuses()["commit"] is StepStatus.SKIPPED

    def test_clean_tree_step_in_runner(self, git_repo):
        (git_repo / "README.md").write_text("changed\n")
        run = run_checklist([clean_tree_step()], repo_root=git_repo)
        assert not run.green
        assert "README.md" in run.results["clean-tree"].reason

    def test_changed_paths_dirty_tree(self, git_repo):
        (git_repo / "src").mkdir()
        (git_repo / "src" / "app.py").write_text("x = 1\n")
        assert changed_paths(git_repo) == ["src/app.py"]

    def test_changed_paths_against_base(self, git_repo):
        commit_file(git_repo, "lib.py", "y = 2\n", "feat: add lib")
        assert changed_paths(git_repo, compare_ref="main") == ["lib.py"]

    def test_git_diff_skips_unrelated_steps(self, git_repo):
        commit_file(git_repo, "lib.py", "y = 2\n", "feat: add lib")
        steps = [
            sh("sync", "true", paths=["pyproject.toml"]),
            sh("test", "true", paths=["*.py"]),
        ]
        run = run_checklist(steps, repo_root=git_repo, use_git_diff=True, compare_ref="main")
        assert run.statuses() == {"sync": StepStatus.SKIPPED, "test": StepStatus.PASSED}

    def test_changed_paths_falls_back_to_previous_commit(self, git_repo):
        commit_file(git_repo, "lib.py", "y = 2\n", "feat: add lib")
        assert changed_paths(git_repo, compare_ref="origin/nope") == ["lib.py"]

    def test_changed_paths_on_single_commit_repo_lists_tracked_files(self, git_repo):
        assert changed_paths(git_repo, compare_ref="origin/nope") == ["README.md"]

    def test_repo_root_from_subdirectory(self, git_repo):
        sub = git_repo / "pkg" / "inner"
        sub.mkdir(parents=True)
        assert git_facts.repo_root(sub).resolve() == git_repo.resolve()
