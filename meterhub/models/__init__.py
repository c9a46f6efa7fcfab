# Import all models here so Alembic's env.py can discover them via Base.metadata
from meterhub.models.base import Base  # noqa: F401
from meterhub.models.customer import Customer  # noqa: F401
from meterhub.models.reading import Reading  # noqa: F401
