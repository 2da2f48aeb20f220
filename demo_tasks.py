"""
Demo Tasks Data for Task Manager Application
"""

from app.constants import TaskStatus, TaskPriority

# Structure: title, description, status, priority, due in N days (None for no due date), tags, owner username
DEMO_TASKS = [
    {
        "title": "Set up CI pipeline",
        "description": "Run the test suite on every push and block merges on failure",
        "status": TaskStatus.IN_PROGRESS,
        "priority": TaskPriority.HIGH,
        "due_in_days": 3,
        "tags": ["devops", "ci"],
        "owner": "alice",
    },
    {
        "title": "Write API documentation",
        "description": "Document every task and user endpoint with request and response examples",
        "status": TaskStatus.TODO,
        "priority": TaskPriority.MEDIUM,
        "due_in_days": 10,
        "tags": ["docs"],
        "owner": "bob",
    },
    {
        "title": "Renew TLS certificate",
        "description": "The staging certificate expired last week",
        "status": TaskStatus.TODO,
        "priority": TaskPriority.HIGH,
        "due_in_days": -2,
        "tags": ["ops", "urgent"],
        "owner": "alice",
    },
    {
        "title": "Plan team offsite",
        "description": None,
        "status": TaskStatus.COMPLETED,
        "priority": TaskPriority.LOW,
        "due_in_days": -7,
        "tags": [],
        "owner": "carol",
    },
    {
        "title": "Review pull requests",
        "description": "Clear the review queue before the release branch is cut",
        "status": TaskStatus.TODO,
        "priority": TaskPriority.MEDIUM,
        "due_in_days": None,
        "tags": ["review"],
        "owner": None,
    },
]
