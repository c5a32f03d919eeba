"""Dashboard landing-page statistics."""

from sqlalchemy.exc import SQLAlchemyError

from blogcms.errors import BASE_EXCEPTION, DatabaseError
from blogcms.monitoring import get_logger
from blogcms.repositories import CategoryRepository, PostRepository, UserRepository
from blogcms.schemas import DashboardStats, RecentPost
from blogcms.services.base import BaseService

logger = get_logger(__name__)


class DashboardService(BaseService):
    async def get_stats(self) -> DashboardStats:
        """Counts and the latest posts; all zeros when the database is unavailable."""
        try:
            async with self.db.session() as session:
                posts = PostRepository(session)
                return DashboardStats(
                    total_posts=await posts.count(),
                    published_posts=await posts.count_published(),
                    draft_posts=await posts.count_drafts(),
                    total_categories=await CategoryRepository(session).count(),
                    total_users=await UserRepository(session).count(),
                    recent_posts=[RecentPost.model_validate(post) for post in await posts.recent()],
                )
        except (DatabaseError, SQLAlchemyError, *BASE_EXCEPTION):
            logger.exception("dashboard stats unavailable")
            return DashboardStats()
