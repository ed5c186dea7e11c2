"""
Preset and generated-text repositories backed by SQLAlchemy/SQLite.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import GeneratedText, Preset, TextTransformation
from repositories.models import GeneratedTextORM, PresetORM


def _preset_from_orm(orm: PresetORM) -> Preset:
    return Preset(
        id=orm.id,
        owner_id=orm.owner_id,
        name=orm.name,
        transformation=TextTransformation.from_dict(orm.transformation),
        created_at=orm.created_at,
    )


def _generated_from_orm(orm: GeneratedTextORM) -> GeneratedText:
    return GeneratedText(
        id=orm.id,
        user_id=orm.user_id,
        text=orm.text,
        transformation=TextTransformation.from_dict(orm.transformation),
        image_path=orm.image_path,
        created_at=orm.created_at,
    )


class PresetsRepository:
    """CRUD operations for saved presets."""

    def list_presets(self, session: Session, owner_id: str) -> List[Preset]:
        presets = (
            session.query(PresetORM)
            .filter(PresetORM.owner_id == owner_id)
            .order_by(PresetORM.created_at.desc())
            .all()
        )
        return [_preset_from_orm(p) for p in presets]

    def get_preset(self, session: Session, preset_id: str) -> Optional[Preset]:
        orm = session.get(PresetORM, preset_id)
        if not orm:
            return None
        return _preset_from_orm(orm)

    def create_preset(self, session: Session, preset: Preset) -> Preset:
        orm = PresetORM(
            id=preset.id,
            owner_id=preset.owner_id,
            name=preset.name,
            transformation=preset.transformation.to_dict(),
            created_at=preset.created_at or datetime.utcnow(),
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _preset_from_orm(orm)

    def rename_preset(self, session: Session, preset_id: str, name: str) -> Optional[Preset]:
        orm = session.get(PresetORM, preset_id)
        if not orm:
            return None
        orm.name = name
        session.commit()
        session.refresh(orm)
        return _preset_from_orm(orm)

    def delete_preset(self, session: Session, owner_id: str, preset_id: str) -> bool:
        """Delete a preset owned by owner_id. Returns False when missing or owned by someone else."""
        orm = session.get(PresetORM, preset_id)
        if not orm or orm.owner_id != owner_id:
            return False
        session.delete(orm)
        session.commit()
        return True


class GeneratedTextsRepository:
    """History of rendered texts per user."""

    def create_generated_text(self, session: Session, generated: GeneratedText) -> GeneratedText:
        orm = GeneratedTextORM(
            id=generated.id,
            user_id=generated.user_id,
            text=generated.text,
            transformation=generated.transformation.to_dict(),
            image_path=generated.image_path,
            created_at=generated.created_at or datetime.utcnow(),
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _generated_from_orm(orm)

    def list_generated_texts(self, session: Session, user_id: str, limit: int = 50) -> List[GeneratedText]:
        rows = (
            session.query(GeneratedTextORM)
            .filter(GeneratedTextORM.user_id == user_id)
            .order_by(GeneratedTextORM.created_at.desc())
            .limit(limit)
            .all()
        )
        return [_generated_from_orm(r) for r in rows]
