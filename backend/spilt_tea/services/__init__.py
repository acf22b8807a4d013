"""Services module for business logic and data operations.

Service classes take an ``AsyncSession`` and implement the platform's
business rules. Pure helpers (trending score, permissions, filter builder)
live in their own modules and need no database.
"""

from spilt_tea.services.auth_service import AuthService
from spilt_tea.services.comment_service import CommentService
from spilt_tea.services.person_service import PersonService
from spilt_tea.services.post_service import PostService
from spilt_tea.services.search_service import SearchService
from spilt_tea.services.user_service import UserService
from spilt_tea.services.vetting_service import VettingService
from spilt_tea.services.vote_service import VoteService

__all__ = [
    "AuthService",
    "CommentService",
    "PersonService",
    "PostService",
    "SearchService",
    "UserService",
    "VettingService",
    "VoteService",
]
