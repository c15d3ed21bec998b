from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.auth import get_current_actor
from app.database import get_db
from app.guard import require_admin
from app.schemas.classroom import ClassCreate, ClassResponse, ClassUpdate
from app.services.authorization import Actor
from app.services.class_registry import ClassRegistry

router = APIRouter(prefix="/api/classes", tags=["classes"])


@router.get("", response_model=list[ClassResponse])
def list_classes(
    _actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Active classes, for browsing and the request dialog."""
    return ClassRegistry(db).list_active()


@router.get("/admin", response_model=list[ClassResponse])
def admin_list_classes(
    admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All classes including archived (admin only)."""
    return ClassRegistry(db).list_all(admin)


@router.get("/{class_id}", response_model=ClassResponse)
def get_class(
    class_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    item = ClassRegistry(db).get(class_id)
    if not item.is_active and not actor.is_admin:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return item


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
def create_class(
    body: ClassCreate,
    admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ClassRegistry(db).create(
        admin,
        name=body.name,
        description=body.description,
        allowed_file_types=body.allowed_file_types,
    )


@router.patch("/{class_id}", response_model=ClassResponse)
def update_class(
    class_id: str,
    body: ClassUpdate,
    admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ClassRegistry(db).update(
        admin,
        class_id,
        name=body.name,
        description=body.description,
        allowed_file_types=body.allowed_file_types,
    )


@router.post("/{class_id}/archive", response_model=ClassResponse)
def archive_class(
    class_id: str,
    admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Soft-archive: hidden from users and closed to new requests. Never deleted."""
    return ClassRegistry(db).archive(admin, class_id)


@router.post("/{class_id}/restore", response_model=ClassResponse)
def restore_class(
    class_id: str,
    admin: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ClassRegistry(db).restore(admin, class_id)
