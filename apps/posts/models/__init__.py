from .post import Post
from .comment import Comment
from .reaction import Reaction

__all__ = ['Post', 'Comment', 'Reaction']
