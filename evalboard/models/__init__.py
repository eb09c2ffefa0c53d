"""Database models."""

from evalboard.models.evaluation import Evaluation
from evalboard.models.user import User
from evalboard.models.user_config import DEFAULT_CONFIG, RUN_POLICIES, UserConfig

__all__ = ["DEFAULT_CONFIG", "RUN_POLICIES", "Evaluation", "User", "UserConfig"]
