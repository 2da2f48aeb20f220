from .api import TaskApiClient, ApiError
from .views import ApiStatusIndicator, TaskListView, TaskFormView
