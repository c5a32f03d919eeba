from blogcms.routes.auth import router as auth_router
from blogcms.routes.blog import router as blog_router
from blogcms.routes.categories import router as categories_router
from blogcms.routes.dashboard import router as dashboard_router
from blogcms.routes.indexing import router as indexing_router
from blogcms.routes.posts import router as posts_router
from blogcms.routes.seo import router as seo_router
from blogcms.routes.users import router as users_router

__all__ = [
    "auth_router",
    "blog_router",
    "categories_router",
    "dashboard_router",
    "indexing_router",
    "posts_router",
    "seo_router",
    "users_router",
]
