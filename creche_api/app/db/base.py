from creche_api.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from creche_api.app.models.user import User  # noqa: F401
from creche_api.app.models.child import Child, ChildParent  # noqa: F401
from creche_api.app.models.child_invite import ChildInvite  # noqa: F401
from creche_api.app.models.creche import Creche, CrecheClass, EnrolledStudent  # noqa: F401
from creche_api.app.models.application import Application  # noqa: F401
from creche_api.app.models.favorite import UserFavorite  # noqa: F401
from creche_api.app.models.article import Article, ArticleComment, ArticleLike  # noqa: F401
from creche_api.app.models.notification import Notification  # noqa: F401
