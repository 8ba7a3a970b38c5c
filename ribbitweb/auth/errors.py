"""Froggy Phrase error taxonomy and the explicit handling policy.

Local validation errors are raised to the caller and shown to the user.
Derivation and linkage errors are logged and swallowed at the subsystem
boundary; the app must stay usable without an identity or a linkage.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Type


class PhraseError(Exception):
    user_message = "Froggy Phrase error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class AlreadyExists(PhraseError):
    user_message = "Froggy Phrase cannot be changed once set"


class MalformedPhrase(PhraseError):
    user_message = "Froggy Phrase must contain exactly 12 words"


class IdentityDerivationFailed(PhraseError):
    user_message = "Could not derive identity from Froggy Phrase"


class RemoteLinkageFailed(PhraseError):
    user_message = "Failed to link Froggy Phrase with the authorization service"


@dataclass(frozen=True)
class ErrorPolicy:
    surface_to_user: bool
    log_level: int
    recovery: str   # reject | empty_identity | retry_next_trigger


ERROR_POLICY: Dict[Type[PhraseError], ErrorPolicy] = {
    AlreadyExists: ErrorPolicy(True, logging.INFO, "reject"),
    MalformedPhrase: ErrorPolicy(True, logging.INFO, "reject"),
    IdentityDerivationFailed: ErrorPolicy(False, logging.ERROR, "empty_identity"),
    RemoteLinkageFailed: ErrorPolicy(False, logging.ERROR, "retry_next_trigger"),
}


def policy_for(exc: PhraseError) -> ErrorPolicy:
    for cls in type(exc).__mro__:
        if cls in ERROR_POLICY:
            return ERROR_POLICY[cls]
    return ErrorPolicy(True, logging.ERROR, "reject")


def log_swallowed(logger: logging.Logger, exc: PhraseError) -> None:
    """Log an error that the policy recovers from instead of surfacing."""
    policy = policy_for(exc)
    cause = exc.__cause__
    logger.log(
        policy.log_level,
        "%s (%s): %s",
        exc.user_message,
        policy.recovery,
        cause if cause is not None else exc,
    )
