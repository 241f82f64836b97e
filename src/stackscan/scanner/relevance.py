"""Prune registry entries that belong to a foreign ecosystem."""

from __future__ import annotations

from stackscan.models import ProjectType

PYTHON_TECHS = frozenset(
    {
        "python",
        "django",
        "flask",
        "fastapi",
        "pytest",
        "pip",
        "virtualenv",
        "conda",
        "poetry",
        "numpy",
        "pandas",
    }
)

JAVA_TECHS = frozenset(
    {
        "java",
        "maven",
        "gradle",
        "spring",
        "springboot",
        "hibernate",
        "junit",
        "testng",
        "tomcat",
        "jetty",
    }
)

NODE_TECHS = frozenset(
    {
        "node_runtime",
        "npm",
        "yarn",
        "react",
        "vue",
        "angular",
        "express",
        "next",
        "webpack",
        "typescript",
        "javascript",
    }
)

DOTNET_TECHS = frozenset({"dotnet", "csharp", "aspnet", "nuget", "msbuild"})

# Technologies never evaluated for a given project type
FOREIGN_TECHS: dict[ProjectType, frozenset[str]] = {
    ProjectType.MAVEN: PYTHON_TECHS | NODE_TECHS,
    ProjectType.GRADLE: PYTHON_TECHS | NODE_TECHS,
    ProjectType.PYTHON: JAVA_TECHS | NODE_TECHS,
    ProjectType.NODE: JAVA_TECHS | PYTHON_TECHS,
    ProjectType.DOTNET: JAVA_TECHS | PYTHON_TECHS | NODE_TECHS,
}


def is_relevant(tech_name: str, project_type: ProjectType) -> bool:
    """Return whether ``tech_name`` should be evaluated for this project type.

    An unknown project type keeps every technology. Declared extensions are
    not consulted: they never exclude a technology.
    """
    foreign = FOREIGN_TECHS.get(project_type)
    if not foreign:
        return True
    return tech_name.lower() not in foreign
