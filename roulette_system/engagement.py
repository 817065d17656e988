"""
Twitter/X Engagement Scoring
Turns the retweeters and likers of a post into weighted giveaway participants
"""

import logging

from .config import LIKE_POINTS, RETWEET_POINTS
from .models import Participant

logger = logging.getLogger(__name__)


def merge_engaged_users(retweets=None, likes=None):
    """
    Merge retweeter and liker lists by user id

    Args:
        retweets: Users who retweeted ({'id', 'username', 'name', ...})
        likes: Users who liked the post

    Returns:
        list: Users in first-seen order with 'retweeted' and 'liked' flags
    """
    users = {}

    for user in retweets or []:
        users[user['id']] = {**user, 'retweeted': True, 'liked': False}

    for user in likes or []:
        existing = users.get(user['id']) or {**user, 'retweeted': False}
        users[user['id']] = {**existing, 'liked': True}

    return list(users.values())


def engagement_score(user, conditions):
    """
    Score a user's engagement with the post

    Required actions count on top of the base score, so a retweet under a
    retweet_required giveaway is worth twice the base retweet points.
    """
    conditions = conditions or {}
    retweeted = bool(user.get('retweeted'))
    liked = bool(user.get('liked'))

    score = 0
    if conditions.get('retweet_required') and retweeted:
        score += RETWEET_POINTS
    if conditions.get('like_required') and liked:
        score += LIKE_POINTS

    score += (LIKE_POINTS if liked else 0) + (RETWEET_POINTS if retweeted else 0)
    return score


def conditions_met(user, conditions):
    """Per-condition pass/fail map for the conditions this giveaway enables"""
    conditions = conditions or {}
    met = {}

    if conditions.get('retweet_required'):
        met['retweeted'] = bool(user.get('retweeted'))
    if conditions.get('like_required'):
        met['liked'] = bool(user.get('liked'))

    minimum_followers = conditions.get('minimum_followers')
    if minimum_followers:
        followers = user.get('followers_count')
        met['minimum_followers'] = followers is not None and followers >= minimum_followers

    return met


def build_engagement_participants(retweets=None, likes=None, conditions=None):
    """
    Build eligible, engagement-weighted participants for a Twitter/X giveaway

    Args:
        retweets: Users who retweeted the post
        likes: Users who liked the post
        conditions: Giveaway conditions (retweet_required, like_required,
            minimum_followers)

    Returns:
        list: Participant objects weighted by engagement score
    """
    participants = []
    skipped = 0

    for user in merge_engaged_users(retweets, likes):
        met = conditions_met(user, conditions)
        if not all(met.values()):
            skipped += 1
            continue

        participants.append(Participant(
            id=str(user['id']),
            display_name=user.get('username') or user.get('name') or "",
            weight=engagement_score(user, conditions),
            avatar_url=user.get('profile_image_url'),
            metadata={
                'display_name': user.get('name'),
                'conditions_met': met,
                'retweeted': bool(user.get('retweeted')),
                'liked': bool(user.get('liked')),
            },
        ))

    logger.info(f"🐦 Loaded {len(participants)} eligible Twitter participants ({skipped} skipped)")
    return participants
