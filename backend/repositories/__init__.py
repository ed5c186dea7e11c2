from .users import UsersRepository
from .presets import PresetsRepository, GeneratedTextsRepository
from .usage import UsageRepository
from . import models

__all__ = [
    "UsersRepository",
    "PresetsRepository",
    "GeneratedTextsRepository",
    "UsageRepository",
    "models",
]
