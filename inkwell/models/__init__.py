"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Relations (follow graph, likes) are edge tables, not array columns

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from inkwell.models.user import User  # noqa: F401
from inkwell.models.follow import Follow  # noqa: F401
from inkwell.models.post import Post  # noqa: F401
from inkwell.models.post_like import PostLike  # noqa: F401
from inkwell.models.comment import Comment  # noqa: F401
