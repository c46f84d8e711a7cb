from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from soulmatch.models import Profile, ChatRequest
from soulmatch.core.exceptions import NotFound, PermissionDenied, TargetOffline, UniquenessViolation, ValidationFailure
from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)

STATUS_NONE = "none"
STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
DECISIONS = (STATUS_APPROVED, STATUS_REJECTED)


class ChatRequestService:
    @staticmethod
    def _get_profile(session: Session, profile_id: int) -> Profile:
        profile = session.get(Profile, profile_id)
        if profile is None:
            raise NotFound(f"Profilo {profile_id} non trovato")
        return profile

    @staticmethod
    def create_request(session: Session, from_profile_id: int, to_profile_id: int,
                       message: Optional[str] = None) -> ChatRequest:
        """Open a pending request for the ordered pair; one request per pair, whatever its status"""
        ChatRequestService._get_profile(session, from_profile_id)
        ChatRequestService._get_profile(session, to_profile_id)

        request = ChatRequest(
            from_profile_id=from_profile_id,
            to_profile_id=to_profile_id,
            status=STATUS_PENDING,
            message=message or None
        )
        try:
            session.add(request)
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.info(f"Duplicate chat request from {from_profile_id} to {to_profile_id}")
            raise UniquenessViolation("Richiesta già inviata.")
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error creating chat request from {from_profile_id} to {to_profile_id}: {e}")
            raise

        logger.info(f"Chat request {request.id} from {from_profile_id} to {to_profile_id}")
        return request

    @staticmethod
    def get_status(session: Session, from_profile_id: int, to_profile_id: int) -> str:
        request = session.query(ChatRequest).filter_by(
            from_profile_id=from_profile_id,
            to_profile_id=to_profile_id
        ).first()
        return request.status if request else STATUS_NONE

    @staticmethod
    def get_request(session: Session, request_id: int) -> ChatRequest:
        request = session.get(ChatRequest, request_id)
        if request is None:
            raise NotFound(f"Richiesta {request_id} non trovata")
        return request

    @staticmethod
    def respond(session: Session, request_id: int, decision: str) -> ChatRequest:
        """Set the request status. Checking that the caller is the recipient is left to the caller."""
        if decision not in DECISIONS:
            raise ValidationFailure(f"Stato non valido: {decision}")
        request = ChatRequestService.get_request(session, request_id)
        try:
            request.status = decision
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error updating chat request {request_id}: {e}")
            raise

        logger.info(f"Chat request {request_id} {decision}")
        return request

    @staticmethod
    def pending_requests_for(session: Session, profile_id: int) -> List[Dict[str, Any]]:
        """Pending requests addressed to a profile, newest first, with the requester's display data"""
        rows = session.query(ChatRequest, Profile).join(
            Profile, ChatRequest.from_profile_id == Profile.id
        ).filter(
            ChatRequest.to_profile_id == profile_id,
            ChatRequest.status == STATUS_PENDING
        ).order_by(ChatRequest.created_at.desc(), ChatRequest.id.desc()).all()

        result = []
        for request, requester in rows:
            result.append({
                "id": request.id,
                "from_profile_id": request.from_profile_id,
                "to_profile_id": request.to_profile_id,
                "status": request.status,
                "message": request.message,
                "created_at": request.created_at.isoformat(),
                "name": requester.name,
                "surname": requester.surname,
                "photo_url": requester.photo_url,
            })

        logger.debug(f"Found {len(result)} pending chat requests for profile {profile_id}")
        return result

    @staticmethod
    def _require_premium(actor: Profile):
        if not actor.is_paid:
            raise PermissionDenied("Funzione riservata agli utenti Premium!")

    @staticmethod
    def request_instant_chat(session: Session, from_profile_id: int, to_profile_id: int,
                             message: Optional[str] = None) -> ChatRequest:
        """Premium-only chat with a profile that is online right now"""
        actor = ChatRequestService._get_profile(session, from_profile_id)
        ChatRequestService._require_premium(actor)
        target = ChatRequestService._get_profile(session, to_profile_id)
        if not target.is_online:
            raise TargetOffline("L'utente non è online: invia un messaggio offline.")
        return ChatRequestService.create_request(session, from_profile_id, to_profile_id, message)

    @staticmethod
    def send_offline_message(session: Session, from_profile_id: int, to_profile_id: int,
                             message: Optional[str] = None) -> ChatRequest:
        """Premium-only message that does not need the recipient to be online"""
        actor = ChatRequestService._get_profile(session, from_profile_id)
        ChatRequestService._require_premium(actor)
        return ChatRequestService.create_request(session, from_profile_id, to_profile_id, message)
