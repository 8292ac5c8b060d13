"""
Request Context Data Model

Identity and correlation data resolved for each authenticated request.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RequestContext:
    """
    Context information extracted from the JWT or development fallbacks.

    Attributes:
        user_id: Identifier of the user who made the request
        request_id: UUID v4 uniquely identifying this request, for log correlation
        email: Optional user email from the JWT
        preferred_language: Optional 'en'/'no' preference from the JWT
        auth_method: 'jwt' or 'anonymous'
    """
    user_id: str
    request_id: str
    email: Optional[str] = None
    preferred_language: Optional[str] = None
    auth_method: str = "jwt"
