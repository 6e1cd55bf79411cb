#!/usr/bin/env python3
"""
Invitation endpoints - candidates list and answer employer invitations.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.app_context import AppContext
from ..dependencies import get_app_context, get_current_user_id
from ..models.requests import InvitationReply
from ..models.responses import InvitationItem, InvitationResponse, InvitationsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invitations", tags=["invitations"])


@router.get("", response_model=InvitationsResponse)
def list_invitations(
    status: Optional[str] = Query(default=None, description="pending, accepted or declined"),
    candidate_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    invitations = ctx.invitations.list_candidate_invitations(candidate_id, status=status)
    return InvitationsResponse(
        success=True,
        count=len(invitations),
        invitations=[InvitationItem.model_validate(invitation) for invitation in invitations]
    )


@router.post("/{invitation_id}/respond", response_model=InvitationResponse)
def respond_to_invitation(
    invitation_id: str,
    body: InvitationReply,
    candidate_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """
    Accept or decline a pending invitation.

    Accepting creates an application for the job. Answering twice returns 409.
    """
    invitation = ctx.invitations.respond_to_invitation(invitation_id, candidate_id, body.response)
    return InvitationResponse(success=True, invitation=InvitationItem.model_validate(invitation))
