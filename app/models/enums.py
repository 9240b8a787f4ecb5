from enum import Enum


class ArticleKind(str, Enum):
    ARTICLE = "article"
    NEWS = "news"
    EDITORIAL = "editorial"
