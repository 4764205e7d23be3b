"""Tests for path resolution and project roots."""

from pathlib import Path

from sasswatch.paths import ProjectRoots, resolve, resolve_all


class TestResolve:
    def test_relative_entry_joins_root(self):
        assert resolve("/proj", "styles") == Path("/proj/styles")

    def test_absolute_entry_unchanged(self):
        assert resolve("/proj", "/abs/styles") == Path("/abs/styles")

    def test_nested_relative_entry(self):
        assert resolve(Path("/proj"), "assets/scss") == Path("/proj/assets/scss")

    def test_resolve_all_preserves_order(self):
        entries = ["b", "/abs/a", "c"]
        assert resolve_all("/proj", entries) == [Path("/proj/b"), Path("/abs/a"), Path("/proj/c")]

    def test_resolve_all_empty(self):
        assert resolve_all("/proj", []) == []


class TestProjectRoots:
    def test_single_root_is_active_by_default(self):
        roots = ProjectRoots(["/proj"])
        assert roots.active == Path("/proj")

    def test_no_active_with_several_roots(self):
        roots = ProjectRoots(["/proj", "/other"])
        assert roots.active is None

    def test_set_active_registers_unknown_root(self):
        roots = ProjectRoots(["/proj"])
        roots.set_active("/other")

        assert roots.active == Path("/other")
        assert roots.roots == [Path("/proj"), Path("/other")]

    def test_set_active_none_clears_explicit_choice(self):
        roots = ProjectRoots(["/proj", "/other"], active="/other")
        roots.set_active(None)
        assert roots.active is None

    def test_set_active_none_with_single_root_means_no_root(self):
        roots = ProjectRoots(["/proj"], active="/proj")
        roots.set_active(None)

        assert roots.active is None
        assert roots.get_project_root("styles") is None

        roots.set_active("/proj")
        assert roots.active == Path("/proj")

    def test_get_project_root_finds_containing_root(self):
        roots = ProjectRoots(["/proj", "/other"])
        assert roots.get_project_root("/other/styles/main") == Path("/other")

    def test_get_project_root_prefers_deepest(self):
        roots = ProjectRoots(["/proj", "/proj/packages/site"])
        assert roots.get_project_root("/proj/packages/site/scss") == Path("/proj/packages/site")
        assert roots.get_project_root("/proj/src") == Path("/proj")

    def test_get_project_root_matches_root_itself(self):
        roots = ProjectRoots(["/proj"])
        assert roots.get_project_root("/proj") == Path("/proj")

    def test_get_project_root_outside_roots(self):
        roots = ProjectRoots(["/proj"])
        assert roots.get_project_root("/project-two/src") is None

    def test_relative_path_uses_active_root(self):
        roots = ProjectRoots(["/proj"])
        assert roots.get_project_root("styles") == Path("/proj")

    def test_relative_path_without_active_root(self):
        roots = ProjectRoots(["/proj", "/other"])
        assert roots.get_project_root("styles") is None
