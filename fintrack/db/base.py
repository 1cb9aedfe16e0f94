# Import all the models, so that Base has them before being
# imported by Alembic or used for create_all
from fintrack.db.base_class import Base  # noqa: F401
from fintrack.models.user import User  # noqa: F401
from fintrack.models.allocation import Allocation  # noqa: F401
from fintrack.models.transaction import Transaction  # noqa: F401
from fintrack.models.reminder import Reminder  # noqa: F401
from fintrack.models.notification import Notification  # noqa: F401
