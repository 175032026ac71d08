from cms_api.models.category import Category, CategoryType
from cms_api.models.refresh_token import RefreshToken
from cms_api.models.tag import Tag
from cms_api.models.user import Role, User

__all__ = [
    "Category",
    "CategoryType",
    "RefreshToken",
    "Role",
    "Tag",
    "User",
]
