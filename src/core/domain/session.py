"""Estado de sesión como enum etiquetado.

Sustituye los flags sueltos (`loading`, `authenticated`, `user`) por un único
`state`: las combinaciones inválidas (autenticado sin perfil) no se pueden construir.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator
from pydantic.config import ConfigDict

from core.domain.models import UserProfile


class SessionState(str, Enum):
    INITIALIZING = "initializing"
    ANONYMOUS = "anonymous"
    TRANSITIONING = "transitioning"
    AUTHENTICATED = "authenticated"


class Session(BaseModel):
    """Snapshot inmutable de la sesión actual."""

    model_config = ConfigDict(frozen=True)

    state: SessionState = SessionState.INITIALIZING
    user: UserProfile | None = None

    @model_validator(mode="after")
    def _user_iff_authenticated(self) -> "Session":
        if (self.state is SessionState.AUTHENTICATED) != (self.user is not None):
            raise ValueError("user must be present iff the session is authenticated")
        return self

    @classmethod
    def initializing(cls) -> "Session":
        return cls(state=SessionState.INITIALIZING)

    @classmethod
    def anonymous(cls) -> "Session":
        return cls(state=SessionState.ANONYMOUS)

    @classmethod
    def transitioning(cls) -> "Session":
        return cls(state=SessionState.TRANSITIONING)

    @classmethod
    def authenticated(cls, user: UserProfile) -> "Session":
        return cls(state=SessionState.AUTHENTICATED, user=user)

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def loading(self) -> bool:
        return self.state is SessionState.INITIALIZING
