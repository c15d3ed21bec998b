"""
Class registry: admins create, update, archive and restore classes; anyone reads them.
Classes are never deleted; archive flips is_active so existing requests keep their target.
"""
import logging
from typing import Iterable

from sqlalchemy.orm import Session

from app.database import transaction
from app.errors import ClassNotFound, InvalidFileTypeSet, ValidationError
from app.models.audit_log import AdminAction, AuditEntityType
from app.models.classroom import Class
from app.services.audit_log import AuditLogService
from app.services.authorization import Action, Actor, authorize

logger = logging.getLogger(__name__)


def normalize_file_types(file_types: Iterable[str] | None) -> list[str]:
    """Lower-case, strip, drop leading dots and blanks, de-duplicate (first occurrence wins)."""
    seen: list[str] = []
    for ft in file_types or []:
        value = (ft or "").strip().lower().lstrip(".")
        if value and value not in seen:
            seen.append(value)
    return seen


class ClassRegistry:
    def __init__(self, db: Session, audit: AuditLogService | None = None):
        self._db = db
        self._audit = audit or AuditLogService(db)

    def create(
        self,
        actor: Actor,
        name: str,
        allowed_file_types: Iterable[str],
        description: str | None = None,
    ) -> Class:
        authorize(actor, Action.CLASS_CREATE)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Class name is required", field="name")
        file_types = normalize_file_types(allowed_file_types)
        if not file_types:
            raise InvalidFileTypeSet()
        item = Class(
            name=name,
            description=(description or "").strip() or None,
            allowed_file_types=file_types,
            created_by_id=actor.actor_id,
        )
        with transaction(self._db):
            self._db.add(item)
            self._db.flush()
            self._audit.record(
                actor.actor_id,
                AdminAction.CREATE_CLASS,
                AuditEntityType.CLASS,
                item.id,
                f'Created class "{item.name}"',
                {"allowed_file_types": file_types},
            )
        self._db.refresh(item)
        logger.info("Class %s created by %s", item.id, actor.actor_id)
        return item

    def get(self, class_id: str) -> Class:
        item = self._db.query(Class).filter(Class.id == class_id).first()
        if not item:
            raise ClassNotFound(class_id)
        return item

    def get_active(self, class_id: str) -> Class | None:
        return (
            self._db.query(Class)
            .filter(Class.id == class_id, Class.is_active.is_(True))
            .first()
        )

    def list_active(self) -> list[Class]:
        return (
            self._db.query(Class)
            .filter(Class.is_active.is_(True))
            .order_by(Class.name)
            .all()
        )

    def list_all(self, actor: Actor) -> list[Class]:
        """Admin listing, archived classes included."""
        authorize(actor, Action.CLASS_UPDATE)
        return self._db.query(Class).order_by(Class.created_at.desc()).all()

    def update(
        self,
        actor: Actor,
        class_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        allowed_file_types: Iterable[str] | None = None,
    ) -> Class:
        authorize(actor, Action.CLASS_UPDATE)
        item = self.get(class_id)
        changes: dict = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Class name is required", field="name")
            changes["name"] = name
        if description is not None:
            changes["description"] = description.strip() or None
        if allowed_file_types is not None:
            file_types = normalize_file_types(allowed_file_types)
            if not file_types:
                raise InvalidFileTypeSet()
            changes["allowed_file_types"] = file_types
        if not changes:
            return item
        with transaction(self._db):
            for field, value in changes.items():
                setattr(item, field, value)
            self._audit.record(
                actor.actor_id,
                AdminAction.UPDATE_CLASS,
                AuditEntityType.CLASS,
                item.id,
                f'Updated class "{item.name}"',
                changes,
            )
        self._db.refresh(item)
        logger.info("Class %s updated by %s: %s", item.id, actor.actor_id, sorted(changes))
        return item

    def archive(self, actor: Actor, class_id: str) -> Class:
        return self._set_active(actor, class_id, False)

    def restore(self, actor: Actor, class_id: str) -> Class:
        return self._set_active(actor, class_id, True)

    def _set_active(self, actor: Actor, class_id: str, active: bool) -> Class:
        authorize(actor, Action.CLASS_UPDATE)
        item = self.get(class_id)
        if item.is_active == active:
            return item
        action = AdminAction.RESTORE_CLASS if active else AdminAction.ARCHIVE_CLASS
        verb = "Restored" if active else "Archived"
        with transaction(self._db):
            item.is_active = active
            self._audit.record(
                actor.actor_id,
                action,
                AuditEntityType.CLASS,
                item.id,
                f'{verb} class "{item.name}"',
            )
        self._db.refresh(item)
        logger.info("Class %s %s by %s", item.id, verb.lower(), actor.actor_id)
        return item
