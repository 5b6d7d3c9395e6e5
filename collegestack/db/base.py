# Import all models here so create_all and Alembic can detect them
from collegestack.db.session import Base

from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.auth.models.revoked_token import RevokedToken
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.comments.models.comment import Comment
from collegestack.modules.posts.votes.models.vote import UserVote
from collegestack.modules.tags.models.tag import Tag, PostTag
from collegestack.modules.catalog.models.catalog import Course, Subject
from collegestack.modules.moderation.models.assignment import ModeratorAssignment
