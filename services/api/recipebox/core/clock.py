import uuid
from datetime import datetime

from ..settings import settings


def now_stamp() -> str:
    """Local wall-clock time formatted for lastModified."""
    return datetime.now().strftime(settings.timestamp_format)


def new_recipe_id() -> str:
    return uuid.uuid4().hex
