from .base import CamelModel, StatusMessage
from .user import UserCreate, UserLogin, LoginResponse, RefreshResponse, TokenPayload
from .allocation import AllocationCreate, AllocationUpdate, AllocationRead, AllocationUsage
from .transaction import TransactionCreate, TransactionUpdate, TransactionRead
from .reminder import ReminderCreate, ReminderUpdate, ReminderRead
from .notification import NotificationRead, NotificationBulkAction
