"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from leetcoach.api.v1.endpoints import problems, cards, reviews, review_queue, push, cron

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(problems.router)
api_router.include_router(cards.router)
api_router.include_router(reviews.router)
api_router.include_router(review_queue.router)
api_router.include_router(push.router)
api_router.include_router(cron.router)
