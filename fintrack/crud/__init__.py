from .user import user
from .allocation import allocation
from .transaction import transaction
from .notification import notification
from . import reminder
