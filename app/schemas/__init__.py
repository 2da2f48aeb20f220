from .common import Pagination
from .user import UserCreate, UserLogin, UserUpdate, UserOut, UserSummary, UserListOut, ProfileUpdateOut
from .tokens import AuthOut
from .task import TaskCreate, TaskUpdate, TaskOut, TaskListOut, TaskDeletedOut
