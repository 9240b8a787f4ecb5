# Import all models so Base.metadata knows every table
from app.models.article import Article, Editorial, NewsArticle  # noqa: F401
from app.models.slug import Slug  # noqa: F401
