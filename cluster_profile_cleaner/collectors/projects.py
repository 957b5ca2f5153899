"""Resolution of operator-given project names to Palette project uids."""
import logging
from typing import List

from cluster_profile_cleaner.exceptions import ProjectNotFoundError
from cluster_profile_cleaner.models.profile import Project

from .datasource import IDataSource

logger = logging.getLogger(__name__)


def list_projects(datasource: IDataSource) -> List[Project]:
    """Return the project registry as Project objects.

    Raises:
        PaletteApiError: If the registry couldn't be fetched.
    """
    return [Project.from_dict(item) for item in datasource.list_projects()]


def find_project(projects: List[Project], name: str) -> Project:
    """Case-insensitive exact match of name against projects.

    When more than one project matches, the first one in registry order wins.

    Raises:
        ProjectNotFoundError: If no project matches.
    """
    wanted = name.casefold()
    matches = [project for project in projects if project.name.casefold() == wanted]

    if not matches:
        logger.error("Project not found: %s", name)
        logger.info("Available projects:")
        for project in projects:
            logger.info("  - %s (UID: %s)", project.name, project.uid)
        raise ProjectNotFoundError(name, [project.name for project in projects])

    if len(matches) > 1:
        logger.warning(
            "%d projects match '%s', using the first one (UID: %s)",
            len(matches),
            name,
            matches[0].uid,
        )
    return matches[0]


def resolve_project(datasource: IDataSource, name: str) -> Project:
    """Fetch the project registry and return the project called name.

    Raises:
        PaletteApiError: If the registry couldn't be fetched.
        ProjectNotFoundError: If no project matches.
    """
    logger.info("Looking up project UID for: %s", name)
    project = find_project(list_projects(datasource), name)
    logger.info("Found project '%s' with UID: %s", name, project.uid)
    return project


def resolve(datasource: IDataSource, name: str) -> str:
    """Uid of the project called name."""
    return resolve_project(datasource, name).uid
