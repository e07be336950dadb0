import random
import uuid
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy import or_, and_
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from app.core.config import DISCOVERY_BATCH_SIZE
from app.core.logging import get_logger
from app.models.match import Match, Message
from app.models.notification import NotificationType
from app.models.profile import Profile
from app.models.swipe import Swipe, SwipeDirection
from app.models.user import User
from app.services.notification_service import NotificationService
from app.services.profile_service import ProfileService, profile_to_dict
from app.services.storage import BlobStore

logger = get_logger(__name__)


def canonical_pair(user_a: uuid.UUID, user_b: uuid.UUID):
    """Order two user ids by their string form, smallest first."""
    return (user_a, user_b) if str(user_a) < str(user_b) else (user_b, user_a)


def find_match(db: Session, user_a: uuid.UUID, user_b: uuid.UUID) -> Optional[Match]:
    user1_id, user2_id = canonical_pair(user_a, user_b)
    return db.query(Match).filter(
        and_(Match.user1_id == user1_id, Match.user2_id == user2_id)
    ).first()


def lock_user_pair(db: Session, user_a: uuid.UUID, user_b: uuid.UUID):
    """
    Row locks on both users, always taken in id order. Two opposite swipes on
    the same pair run one after the other, so the second sees the first's swipe.
    """
    return (
        db.query(User)
        .filter(User.id.in_(canonical_pair(user_a, user_b)))
        .order_by(User.id)
        .with_for_update()
    )


class SwipeService:
    """Swipe decisions, match detection and the discovery feed"""

    @staticmethod
    def find_swipe(db: Session, swiper_id: uuid.UUID, swiped_id: uuid.UUID) -> Optional[Swipe]:
        return db.query(Swipe).filter(
            Swipe.swiper_id == swiper_id,
            Swipe.swiped_id == swiped_id
        ).first()

    @staticmethod
    def swipe(
        db: Session,
        user: User,
        swiped_user_id: uuid.UUID,
        direction: SwipeDirection
    ) -> Dict[str, Any]:
        """
        Record a swipe and create a match on a reciprocal right swipe.

        Returns:
            {"is_match": bool, "match_id": UUID | None}
        """
        if swiped_user_id == user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot swipe on yourself"
            )

        if len(lock_user_pair(db, user.id, swiped_user_id).all()) < 2:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        if SwipeService.find_swipe(db, user.id, swiped_user_id):
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Already swiped on this user"
            )

        db.add(Swipe(swiper_id=user.id, swiped_id=swiped_user_id, direction=direction))
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Already swiped on this user"
            )

        match = None
        if direction == SwipeDirection.RIGHT:
            reciprocal = db.query(Swipe).filter(
                Swipe.swiper_id == swiped_user_id,
                Swipe.swiped_id == user.id,
                Swipe.direction == SwipeDirection.RIGHT
            ).first()

            if reciprocal:
                match = find_match(db, user.id, swiped_user_id)
                if match is None:
                    match = SwipeService._create_match(db, user.id, swiped_user_id)

        db.commit()

        logger.info(
            "Swipe recorded",
            swiper_id=str(user.id),
            swiped_id=str(swiped_user_id),
            direction=direction.value,
            is_match=match is not None,
        )

        if match is None:
            return {"is_match": False, "match_id": None}
        return {"is_match": True, "match_id": match.id}

    @staticmethod
    def _create_match(db: Session, user_id: uuid.UUID, other_id: uuid.UUID) -> Match:
        user1_id, user2_id = canonical_pair(user_id, other_id)
        match = Match(user1_id=user1_id, user2_id=user2_id)
        db.add(match)
        try:
            db.flush()
        except IntegrityError:
            # Only reachable when the pair lock was bypassed; the swipe is lost with it
            db.rollback()
            logger.error("Match pair already exists", user1_id=str(user1_id), user2_id=str(user2_id))
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Match already exists for this pair, please retry"
            )

        for recipient, other in ((user_id, other_id), (other_id, user_id)):
            NotificationService.create(
                db,
                user_id=recipient,
                type=NotificationType.MATCH,
                title="New match!",
                message="You have a new co-founder match. Say hello!",
                related_user_id=other,
                related_match_id=match.id,
                action_url=f"/matches/{match.id}",
            )
        return match

    @staticmethod
    def get_discovery_profiles(
        db: Session,
        user: User,
        blob_store: BlobStore,
        limit: int = DISCOVERY_BATCH_SIZE
    ) -> List[Dict[str, Any]]:
        """
        Active profiles the caller has not swiped on yet, shuffled.
        Reshuffled on every call; there is no cursor.
        """
        if not ProfileService.get_by_user_id(db, user.id):
            return []

        swiped_ids = {
            swiped_id for (swiped_id,) in
            db.query(Swipe.swiped_id).filter(Swipe.swiper_id == user.id).all()
        }

        candidates = [
            profile for profile in
            db.query(Profile).filter(Profile.is_active.is_(True)).all()
            if profile.user_id != user.id and profile.user_id not in swiped_ids
        ]
        random.shuffle(candidates)

        return [profile_to_dict(profile, blob_store) for profile in candidates[:limit]]

    @staticmethod
    def get_liked_profiles(db: Session, user: User, blob_store: BlobStore) -> List[Dict[str, Any]]:
        """Profiles the caller swiped right on, most recently liked first"""
        right_swipes = db.query(Swipe).filter(
            Swipe.swiper_id == user.id,
            Swipe.direction == SwipeDirection.RIGHT
        ).order_by(Swipe.created_at.desc()).all()

        liked = []
        for swipe in right_swipes:
            profile = db.query(Profile).filter(
                Profile.user_id == swipe.swiped_id,
                Profile.is_active.is_(True)
            ).first()
            if not profile:
                continue

            data = profile_to_dict(profile, blob_store)
            data["is_match"] = find_match(db, user.id, swipe.swiped_id) is not None
            data["liked_at"] = swipe.created_at
            liked.append(data)

        return liked

    @staticmethod
    def get_agent_profiles(db: Session, user: User) -> Dict[str, Any]:
        """Complete, active profiles of everyone else plus the caller's own"""
        profiles = db.query(Profile).filter(
            Profile.is_active.is_(True),
            Profile.is_complete.is_(True),
            Profile.user_id != user.id
        ).all()

        return {
            "profiles": profiles,
            "current_user": ProfileService.get_by_user_id(db, user.id),
        }


class MatchService:
    """Matches and the per-match message log"""

    @staticmethod
    def get_participating_match(db: Session, user: User, match_id: uuid.UUID, action: str) -> Match:
        match = db.query(Match).filter(Match.id == match_id).first()
        if not match or not match.has_participant(user.id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not authorized to {action} this match"
            )
        return match

    @staticmethod
    def get_matches(db: Session, user: User, blob_store: BlobStore) -> List[Dict[str, Any]]:
        matches = db.query(Match).filter(
            or_(Match.user1_id == user.id, Match.user2_id == user.id)
        ).all()

        results = []
        for match in matches:
            other_profile = ProfileService.get_by_user_id(db, match.other_user_id(user.id))
            if not other_profile:
                continue

            latest_message = (
                db.query(Message)
                .filter(Message.match_id == match.id)
                .order_by(Message.sent_at.desc())
                .first()
            )

            results.append({
                "match_id": match.id,
                "matched_at": match.matched_at,
                "profile": profile_to_dict(other_profile, blob_store),
                "latest_message": latest_message,
            })

        def last_activity(item):
            latest = item["latest_message"]
            return latest.sent_at if latest else item["matched_at"]

        results.sort(key=last_activity, reverse=True)
        return results

    @staticmethod
    def get_messages(db: Session, user: User, match_id: uuid.UUID) -> List[Message]:
        MatchService.get_participating_match(db, user, match_id, "view")
        return (
            db.query(Message)
            .filter(Message.match_id == match_id)
            .order_by(Message.sent_at.asc())
            .all()
        )

    @staticmethod
    def send_message(db: Session, user: User, match_id: uuid.UUID, content: str) -> Message:
        match = MatchService.get_participating_match(db, user, match_id, "send message to")

        message = Message(match_id=match.id, sender_id=user.id, content=content)
        db.add(message)
        db.flush()

        preview = content if len(content) <= 100 else content[:100] + "..."
        NotificationService.create(
            db,
            user_id=match.other_user_id(user.id),
            type=NotificationType.MESSAGE,
            title="New message",
            message=preview,
            related_user_id=user.id,
            related_match_id=match.id,
            action_url=f"/matches/{match.id}",
        )

        db.commit()
        db.refresh(message)
        return message
