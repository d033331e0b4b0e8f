"""
API dependency helpers.

Provides the dependency-resolved caller identity for routes.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from portal.api.auth import get_company_user, resolve_identity_from_headers, to_identity
from portal.db.database import get_db
from portal.identity import IdentityData
from portal.utils.runtime import DEV_USER_EMAIL, dev_mode_active

logger = logging.getLogger(__name__)

# Contract:
# Returns the IdentityData of the company user behind the request.
# Raises 401 if no identity is forwarded, 403 if it is not a company user.


def get_current_identity(
    db: Session = Depends(get_db),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> IdentityData:
    if dev_mode_active():
        email = DEV_USER_EMAIL
    else:
        _name, email = resolve_identity_from_headers(
            x_auth_request_user=x_auth_request_user,
            x_auth_request_email=x_auth_request_email,
            x_forwarded_user=x_forwarded_user,
            x_forwarded_email=x_forwarded_email,
        )
        if not email:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    user = get_company_user(db, email)
    if user is None:
        logger.info("identity_rejected email=%s reason=not_a_company_user", email)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is not assigned to a company")
    return to_identity(user)
