"""Workspace management for emberls."""
from .cache import IndexCache, ProjectIndex
from .layout import ProjectLayout, StaticProjectLayout
from .project_roots import Project, ProjectRoots

__all__ = ['IndexCache', 'ProjectIndex', 'ProjectLayout', 'StaticProjectLayout', 'Project', 'ProjectRoots']
