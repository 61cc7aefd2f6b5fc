# REACTION TYPE Choices ----------------------------------------------------------------------------
LOVE = 'love'
LIKE = 'like'
FUNNY = 'funny'
HORROR = 'horror'
REACTION_TYPE_CHOICES = [
    (LOVE, 'Love'),
    (LIKE, 'Like'),
    (FUNNY, 'Funny'),
    (HORROR, 'Horror'),
]
REACTION_TYPES = tuple(value for value, _ in REACTION_TYPE_CHOICES)


# TARGET TYPE Choices ----------------------------------------------------------------------------
TARGET_POST = 'post'
TARGET_COMMENT = 'comment'
TARGET_TYPE_CHOICES = [
    (TARGET_POST, 'Post'),
    (TARGET_COMMENT, 'Comment'),
]
TARGET_TYPES = tuple(value for value, _ in TARGET_TYPE_CHOICES)


def empty_reaction_counts():
    """Default value for `reaction_counts`: every type at zero plus total."""
    counts = {rtype: 0 for rtype in REACTION_TYPES}
    counts['total'] = 0
    return counts
