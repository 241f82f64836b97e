"""Tests for ecosystem-based relevance filtering."""

from __future__ import annotations

import pytest

from stackscan.models import ProjectType
from stackscan.scanner.relevance import (
    DOTNET_TECHS,
    FOREIGN_TECHS,
    JAVA_TECHS,
    NODE_TECHS,
    PYTHON_TECHS,
    is_relevant,
)


class TestIsRelevant:
    @pytest.mark.parametrize("tech", ["django", "react", "java", "dotnet", "postgresql"])
    def test_unknown_project_keeps_everything(self, tech: str):
        assert is_relevant(tech, ProjectType.UNKNOWN)

    @pytest.mark.parametrize("project_type", [ProjectType.MAVEN, ProjectType.GRADLE])
    def test_java_projects_drop_python_and_node(self, project_type: ProjectType):
        assert not is_relevant("django", project_type)
        assert not is_relevant("react", project_type)
        assert is_relevant("java", project_type)
        assert is_relevant("hibernate", project_type)

    def test_python_project_drops_java_and_node(self):
        assert not is_relevant("spring", ProjectType.PYTHON)
        assert not is_relevant("node_runtime", ProjectType.PYTHON)
        assert is_relevant("django", ProjectType.PYTHON)

    def test_node_project_drops_java_and_python(self):
        assert not is_relevant("junit", ProjectType.NODE)
        assert not is_relevant("flask", ProjectType.NODE)
        assert is_relevant("express", ProjectType.NODE)

    def test_dotnet_project_drops_all_other_ecosystems(self):
        for tech in ("java", "pandas", "vue"):
            assert not is_relevant(tech, ProjectType.DOTNET)
        assert is_relevant("aspnet", ProjectType.DOTNET)

    def test_shared_technologies_are_always_relevant(self):
        """Databases, containers and IaC belong to no ecosystem."""
        for project_type in ProjectType:
            assert is_relevant("postgresql", project_type)
            assert is_relevant("docker", project_type)

    def test_name_match_is_case_insensitive(self):
        assert not is_relevant("Django", ProjectType.MAVEN)

    def test_no_project_type_excludes_its_own_ecosystem(self):
        assert not FOREIGN_TECHS[ProjectType.MAVEN] & JAVA_TECHS
        assert not FOREIGN_TECHS[ProjectType.PYTHON] & PYTHON_TECHS
        assert not FOREIGN_TECHS[ProjectType.NODE] & NODE_TECHS
        assert not FOREIGN_TECHS[ProjectType.DOTNET] & DOTNET_TECHS
