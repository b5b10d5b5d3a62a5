"""
MIRA Portal - Portal Section Redirects

Decides, for every page request, whether the requested path belongs to the
section of the user's role and where to send the user otherwise.

Two loop guards:
- an attempts counter per mount (login session); once it passes the cap
  no more redirects are issued and a single warning is raised
- the last redirect target; landing on it clears it, and a target equal
  to it is not issued again
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

from mira_portal.services.roles import (
    ADMIN, DEFAULT_ROLE, dashboard_for, role_for_path, is_admin_path,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = '/login'
PUBLIC_PATHS = ('/', '/login', '/register')
EXEMPT_PREFIXES = ('/static', '/functions', '/api', '/logout', '/health')

MAX_REDIRECT_ATTEMPTS = 5
TOO_MANY_REDIRECTS = 'Too many redirects detected. Automatic navigation has been paused.'


def is_exempt(path):
    """Paths outside the portal pages: assets, JSON endpoints, logout."""
    return any(path == prefix or path.startswith(prefix + '/') for prefix in EXEMPT_PREFIXES)


@dataclass
class RedirectState:
    """Navigation state of one mount."""
    attempts: int = 0
    last_target: Optional[str] = None
    warned: bool = False

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        if not data:
            return cls()
        return cls(
            attempts=int(data.get('attempts', 0)),
            last_target=data.get('last_target'),
            warned=bool(data.get('warned', False)),
        )


@dataclass(frozen=True)
class RedirectDecision:
    target: Optional[str] = None
    warning: Optional[str] = None

    @property
    def should_redirect(self) -> bool:
        return self.target is not None


NO_ACTION = RedirectDecision()


def compute_target(session, path):
    """
    Where the user on path belongs, or None when path is fine.

    First match wins:
    (a) anonymous outside the public paths -> login
    (b) superadmin outside /admin -> admin dashboard
    (c) authenticated on a public path -> role dashboard
    (d) authenticated in another role's section -> role dashboard
    """
    if not session.is_authenticated:
        return LOGIN_PATH if path not in PUBLIC_PATHS else None

    if session.is_superadmin:
        return dashboard_for(ADMIN) if not is_admin_path(path) else None

    role = session.role or DEFAULT_ROLE
    if path in PUBLIC_PATHS:
        return dashboard_for(role)

    section = role_for_path(path)
    if section is not None and section != role:
        return dashboard_for(role)

    return None


class AuthRedirect:
    """Redirect decision with loop protection for one mount."""

    def __init__(self, state=None, max_attempts=MAX_REDIRECT_ATTEMPTS):
        self.state = state or RedirectState()
        self.max_attempts = max_attempts

    def evaluate(self, session, path):
        """Returns the RedirectDecision for session on path."""
        if session.is_loading:
            logger.debug('Authentication still loading, skipping redirect for %s', path)
            return NO_ACTION

        if self.state.last_target == path:
            self.state.last_target = None
            return NO_ACTION

        target = compute_target(session, path)
        if target is None or target == path:
            return NO_ACTION

        if self.state.attempts > self.max_attempts:
            if self.state.warned:
                return NO_ACTION
            logger.error('Too many redirect attempts for %s, stopping redirection', session.email or 'anonymous')
            self.state.warned = True
            return RedirectDecision(warning=TOO_MANY_REDIRECTS)

        if target == self.state.last_target:
            logger.warning('Already redirected to %s, skipping', target)
            return NO_ACTION

        logger.info('Redirecting %s from %s to %s', session.email or 'anonymous', path, target)
        self.state.last_target = target
        self.state.attempts += 1
        return RedirectDecision(target=target)
