# app/services/marketplace/project_service.py
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import InvalidStateError, NotFoundError, StaleStateError, UnauthorizedError
from app.db.models import Project, ProjectStatus
from app.services.marketplace.transitions import guarded_update
from app.services.marketplace.validation import validate_amount, validate_text

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200


class ProjectService:
    """Projects owned by clients: posting, editing and the client-driven status changes"""

    def __init__(self, session: Session, now: Optional[Callable[[], datetime]] = None):
        self.session = session
        self._now = now or datetime.utcnow

    def get_project(self, project_id: int) -> Project:
        project = self.session.get(Project, project_id)
        if project is None or project.is_deleted:
            raise NotFoundError("Project not found.")
        return project

    def list_open_projects(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Project], int]:
        """Open projects, newest first; returns (page items, total count)"""
        filters = [Project.status == ProjectStatus.OPEN, Project.is_deleted == False]  # noqa: E712
        if category:
            filters.append(Project.category == category)
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(or_(Project.title.ilike(pattern), Project.description.ilike(pattern)))

        total = self.session.exec(select(func.count(Project.id)).where(*filters)).one()
        page = max(page, 1)
        statement = (
            select(Project)
            .where(*filters)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.session.exec(statement).all()), total

    def list_projects_by_client(self, client_id: str) -> List[Project]:
        statement = (
            select(Project)
            .where(Project.client_id == client_id, Project.is_deleted == False)  # noqa: E712
            .order_by(Project.created_at.desc())
        )
        return list(self.session.exec(statement).all())

    def create_project(
        self,
        client_id: str,
        title: str,
        description: str,
        budget,
        deadline: Optional[datetime] = None,
        category: Optional[str] = None,
    ) -> Project:
        now = self._now()
        project = Project(
            title=validate_text(title, "title", max_length=TITLE_MAX_LENGTH),
            description=validate_text(description, "description"),
            budget=validate_amount(budget, "budget"),
            deadline=deadline,
            category=(category or "").strip() or None,
            client_id=client_id,
            status=ProjectStatus.OPEN,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(project)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating project for client {client_id}: {e}")
            raise
        self.session.refresh(project)
        logger.info(f"Project {project.id} created by client {client_id}")
        return project

    def update_project(
        self,
        project_id: int,
        acting_client_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        budget=None,
        deadline: Optional[datetime] = None,
        category: Optional[str] = None,
    ) -> Project:
        """Edit an open project's details; fields left as None are unchanged"""
        project = self._get_owned(project_id, acting_client_id)
        if project.status != ProjectStatus.OPEN:
            raise InvalidStateError("Only open projects can be edited")

        if title is not None:
            project.title = validate_text(title, "title", max_length=TITLE_MAX_LENGTH)
        if description is not None:
            project.description = validate_text(description, "description")
        if budget is not None:
            project.budget = validate_amount(budget, "budget")
        if deadline is not None:
            project.deadline = deadline
        if category is not None:
            project.category = category.strip() or None
        project.updated_at = self._now()

        try:
            self.session.add(project)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error updating project {project_id}: {e}")
            raise
        self.session.refresh(project)
        return project

    def close_project(self, project_id: int, acting_client_id: str) -> Project:
        """Stop accepting bids on an open project"""
        return self._transition(
            project_id, acting_client_id, [ProjectStatus.OPEN], ProjectStatus.CLOSED
        )

    def cancel_project(self, project_id: int, acting_client_id: str) -> Project:
        return self._transition(
            project_id,
            acting_client_id,
            [ProjectStatus.OPEN, ProjectStatus.IN_PROGRESS],
            ProjectStatus.CANCELLED,
        )

    def delete_project(self, project_id: int, acting_client_id: str) -> bool:
        """Soft delete; the row and its bids stay for history"""
        project = self._get_owned(project_id, acting_client_id)
        project.is_deleted = True
        project.updated_at = self._now()
        try:
            self.session.add(project)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error deleting project {project_id}: {e}")
            raise
        logger.info(f"Project {project_id} deleted by client {acting_client_id}")
        return True

    def _get_owned(self, project_id: int, acting_client_id: str) -> Project:
        project = self.get_project(project_id)
        if project.client_id != acting_client_id:
            raise UnauthorizedError("You are not authorized to perform this action.")
        return project

    def _transition(
        self,
        project_id: int,
        acting_client_id: str,
        allowed: Iterable[ProjectStatus],
        new_status: ProjectStatus,
    ) -> Project:
        project = self._get_owned(project_id, acting_client_id)
        if project.status == new_status:
            return project
        allowed = list(allowed)
        if project.status not in allowed:
            raise InvalidStateError(
                f"Project is {project.status.value} and cannot be {new_status.value}"
            )
        try:
            guarded_update(
                self.session, Project, project.id, allowed,
                {"status": new_status, "updated_at": self._now()},
            )
            self.session.commit()
        except StaleStateError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error updating project {project_id}: {e}")
            raise
        self.session.refresh(project)
        logger.info(f"Project {project_id} {new_status.value} by client {acting_client_id}")
        return project
