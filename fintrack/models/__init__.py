from .user import User
from .allocation import Allocation
from .transaction import Transaction
from .reminder import Reminder
from .notification import Notification
