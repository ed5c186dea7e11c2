from datetime import datetime, timedelta

from domain.models import GeneratedText, Preset
from repositories import GeneratedTextsRepository, PresetsRepository, UsageRepository, UsersRepository
from services.generator import DEFAULT_TRANSFORMATION, generate_from_preset

users_repo = UsersRepository()
presets_repo = PresetsRepository()
generated_repo = GeneratedTextsRepository()
usage_repo = UsageRepository()


def test_get_or_create_user_is_idempotent(db_session):
    created = users_repo.get_or_create_user(db_session, "42", farcaster_id="42")
    again = users_repo.get_or_create_user(db_session, "42")
    assert created.id == again.id == "42"
    assert again.farcaster_id == "42"
    assert again.generated_styles_count == 0


def test_increment_generated_count(db_session):
    users_repo.get_or_create_user(db_session, "1")
    users_repo.increment_generated_count(db_session, "1")
    user = users_repo.increment_generated_count(db_session, "1")
    assert user.generated_styles_count == 2
    assert users_repo.increment_generated_count(db_session, "missing") is None


def test_premium_expiry_roundtrip(db_session):
    expires = datetime(2030, 1, 1)
    users_repo.set_premium_expiry(db_session, "9", expires)
    assert users_repo.get_premium_expiry(db_session, "9") == expires
    assert users_repo.get_premium_expiry(db_session, "nobody") is None


def test_presets_crud(db_session):
    users_repo.get_or_create_user(db_session, "u1")
    now = datetime(2025, 1, 1)
    older = presets_repo.create_preset(
        db_session,
        Preset(id="p1", owner_id="u1", name="Neon copy", transformation=generate_from_preset("neon"), created_at=now),
    )
    presets_repo.create_preset(
        db_session,
        Preset(
            id="p2",
            owner_id="u1",
            name="Default",
            transformation=DEFAULT_TRANSFORMATION,
            created_at=now + timedelta(minutes=1),
        ),
    )
    assert older.transformation == generate_from_preset("neon")

    listed = presets_repo.list_presets(db_session, "u1")
    assert [p.id for p in listed] == ["p2", "p1"]
    assert presets_repo.list_presets(db_session, "someone-else") == []

    renamed = presets_repo.rename_preset(db_session, "p1", "Glow")
    assert renamed.name == "Glow"
    assert presets_repo.get_preset(db_session, "p1").name == "Glow"

    assert not presets_repo.delete_preset(db_session, "intruder", "p1")
    assert presets_repo.delete_preset(db_session, "u1", "p1")
    assert presets_repo.get_preset(db_session, "p1") is None


def test_generated_history_newest_first(db_session):
    users_repo.get_or_create_user(db_session, "u2")
    base = datetime(2025, 1, 1)
    for i in range(3):
        generated_repo.create_generated_text(
            db_session,
            GeneratedText(
                id=f"g{i}",
                user_id="u2",
                text=f"Text {i}",
                transformation=DEFAULT_TRANSFORMATION,
                image_path=f"users/u2/generated/g{i}.png",
                created_at=base + timedelta(minutes=i),
            ),
        )
    history = generated_repo.list_generated_texts(db_session, "u2", limit=2)
    assert [g.id for g in history] == ["g2", "g1"]
    assert history[0].transformation == DEFAULT_TRANSFORMATION


def test_usage_counters(db_session):
    usage_repo.increment_usage(db_session, "u3", "generate")
    usage_repo.increment_usage(db_session, "u3", "generate")
    usage_repo.increment_usage(db_session, "u3", "frame_generate")
    assert usage_repo.get_user_usage(db_session, "u3", "generate") == 2
    assert usage_repo.get_user_usage(db_session, "u3", "frame_generate") == 1
    assert usage_repo.get_user_usage(db_session, "u4", "generate") == 0
