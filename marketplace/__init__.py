"""
Freelance Marketplace
Clients post projects, talents and agencies pick them, everyone talks in threads.

Architecture:
- PostgreSQL (or SQLite in development): users, profiles, projects, picks, messages
- MongoDB: verification submissions and reviews, kept as an audit trail
- marketplace.client: Python client with local bookmarks and chat polling
"""

__version__ = "1.0.0"
