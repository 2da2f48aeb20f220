"""
Demo Users Data for Task Manager Application
"""

# Passwords are hashed on insert, never stored as given here
DEMO_USERS = [
    {
        "username": "alice",
        "email": "alice@example.com",
        "password": "password123",
        "first_name": "Alice",
        "last_name": "Johnson",
    },
    {
        "username": "bob",
        "email": "bob@example.com",
        "password": "password123",
        "first_name": "Bob",
        "last_name": "Smith",
    },
    {
        "username": "carol",
        "email": "carol@example.com",
        "password": "password123",
        "first_name": None,
        "last_name": None,
    },
]
