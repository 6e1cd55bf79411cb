#!/usr/bin/env python3
"""
Invitation Service - employer invites a matched candidate to apply

State machine on EmployerPowerMatch.invitation_status:
    not_invited -> pending -> accepted | declined

Every transition is a conditional update on the expected current state,
so a second send or a second response is rejected without touching the
stored state. Accepting creates the candidate's Application (or reuses an
existing one for the same job) in the same transaction.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.errors import (
    AlreadyExistsError, AuthorizationFailure, InvalidRequestError, NotFoundError, PersistenceFailure
)
from core.power_match.dto import InvitationDTO, invitation_from_orm
from core.utils import utc_now
from database.uow import power_match_uow

logger = logging.getLogger(__name__)

INVITATION_RESPONSES = ('accepted', 'declined')


def invitation_cover_letter(company_name: Optional[str]) -> str:
    return f"Applied via direct invitation from {company_name or 'employer'}."


class InvitationService:
    def __init__(self, session_factory: sessionmaker, clock: Callable[[], datetime] = utc_now):
        self.session_factory = session_factory
        self.clock = clock

    def send_invitation(
        self,
        match_id: str,
        employer_id: str,
        job_id: str,
        candidate_id: str,
        message: Optional[str] = None
    ) -> str:
        """
        Invite the candidate behind an employer match. Returns the invitation id.

        Raises:
            NotFoundError: unknown match
            AuthorizationFailure: employer, job or candidate disagree with the match
            AlreadyExistsError: an invitation was already sent for this match
        """
        now = self.clock()
        try:
            with power_match_uow(self.session_factory) as repo:
                match = repo.employer_matches.get_by_id(match_id)
                if match is None:
                    raise NotFoundError(f"Employer power match {match_id} not found")
                if match.employer_id != employer_id:
                    raise AuthorizationFailure(
                        f"Employer power match {match_id} does not belong to employer {employer_id}"
                    )
                if match.job_id != job_id or match.user_id != candidate_id:
                    raise AuthorizationFailure(
                        f"Job or candidate does not match employer power match {match_id}"
                    )

                if not repo.employer_matches.mark_invited(match_id, now):
                    raise AlreadyExistsError(f"Invitation already sent for match {match_id}")

                invitation = repo.invitations.create(
                    power_match_id=match_id,
                    employer_id=employer_id,
                    job_id=job_id,
                    candidate_id=candidate_id,
                    message=message,
                    created_at=now
                )
                invitation_id = invitation.id
        except IntegrityError as e:
            raise AlreadyExistsError(f"Invitation already sent for match {match_id}") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to send invitation for match {match_id}: {e}")
            raise PersistenceFailure(f"Failed to send invitation for match {match_id}") from e

        logger.info(f"Employer {employer_id} invited candidate {candidate_id} to job {job_id}")
        return invitation_id

    def respond_to_invitation(self, invitation_id: str, candidate_id: str, response: str) -> InvitationDTO:
        """
        Accept or decline a pending invitation.

        Raises:
            InvalidRequestError: response is not accepted/declined
            NotFoundError: unknown invitation
            AuthorizationFailure: invitation addressed to another candidate
            AlreadyExistsError: invitation already answered
        """
        if response not in INVITATION_RESPONSES:
            raise InvalidRequestError(
                f"Invalid response {response!r}, expected one of {', '.join(INVITATION_RESPONSES)}"
            )

        now = self.clock()
        try:
            with power_match_uow(self.session_factory) as repo:
                invitation = repo.invitations.get_by_id(invitation_id)
                if invitation is None:
                    raise NotFoundError(f"Invitation {invitation_id} not found")
                if invitation.candidate_id != candidate_id:
                    raise AuthorizationFailure(
                        f"Invitation {invitation_id} is not addressed to candidate {candidate_id}"
                    )

                if not repo.invitations.respond(invitation_id, response, now):
                    raise AlreadyExistsError(f"Invitation {invitation_id} was already answered")
                if not repo.employer_matches.resolve_invitation(invitation.power_match_id, response):
                    raise AlreadyExistsError(
                        f"Employer power match {invitation.power_match_id} has no pending invitation"
                    )

                if response == 'accepted':
                    application = repo.applications.get_for_user_and_job(candidate_id, invitation.job_id)
                    if application is None:
                        employer = repo.profiles.get_profile(invitation.employer_id)
                        company_name = None
                        if employer is not None and employer.employer_profile is not None:
                            company_name = employer.employer_profile.company_name
                        application = repo.applications.create(
                            user_id=candidate_id,
                            job_id=invitation.job_id,
                            created_at=now,
                            status='pending',
                            cover_letter=invitation_cover_letter(company_name)
                        )
                    repo.invitations.link_application(invitation_id, application.id)

                invitation = repo.invitations.get_by_id(invitation_id, refresh=True)
                result = invitation_from_orm(invitation)
        except SQLAlchemyError as e:
            logger.error(f"Failed to record response for invitation {invitation_id}: {e}")
            raise PersistenceFailure(f"Failed to record response for invitation {invitation_id}") from e

        logger.info(f"Candidate {candidate_id} {response} invitation {invitation_id}")
        return result

    def list_candidate_invitations(self, candidate_id: str, status: Optional[str] = None) -> List[InvitationDTO]:
        with power_match_uow(self.session_factory) as repo:
            return [
                invitation_from_orm(invitation)
                for invitation in repo.invitations.list_for_candidate(candidate_id, status=status)
            ]
