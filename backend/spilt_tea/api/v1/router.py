"""API v1 router -- aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from spilt_tea.api.v1 import auth, comments, health, persons, posts, search, trending, users, vetting

api_v1_router = APIRouter()

api_v1_router.include_router(health.router, tags=["health"])
api_v1_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_v1_router.include_router(users.router, prefix="/users", tags=["users"])
api_v1_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_v1_router.include_router(comments.router, prefix="/posts", tags=["comments"])
api_v1_router.include_router(persons.router, prefix="/persons", tags=["persons"])
api_v1_router.include_router(trending.router, prefix="/search/trending", tags=["trending"])
api_v1_router.include_router(search.router, prefix="/search", tags=["search"])
api_v1_router.include_router(vetting.router, prefix="/vetting", tags=["vetting"])
