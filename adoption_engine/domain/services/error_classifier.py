"""Remote error classifier.

Maps the backend's (status, message) pairs to an ErrorKind. Message
rules are checked before status fallbacks because the backend reuses
status codes across unrelated failures (400 for both self-adoption and
missing fields, 409 for both duplicates and history blocks).

Matching is case- and accent-insensitive. The rule set is best-effort:
unrecognized messages classify as UNKNOWN and callers log them.
"""

from __future__ import annotations

import unicodedata

from adoption_engine.domain.models.remote_error import ClassifiedError, ErrorKind

# Ordered: first match wins. Patterns are already normalized (lowercase, no accents).
_MESSAGE_RULES: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (
        ErrorKind.SESSION_EXPIRED,
        ("sessao expirada", "token expirado", "token invalido", "session expired"),
    ),
    (
        ErrorKind.SELF_ADOPTION,
        (
            "nao pode adotar seu proprio pet",
            "proprio_pet",
            "proprio pet",
            "own pet",
        ),
    ),
    (
        ErrorKind.READOPTION,
        (
            "adotado anteriormente",
            "adotou este pet anteriormente",
            "ja adotou este pet",
            "historico de adocao",
            "readocao",
            "previously adopted",
            "re-adopt",
        ),
    ),
    (
        ErrorKind.ALREADY_EXISTS,
        (
            "ja existe",
            "ja possui um termo",
            "ja esta em seus pets",
            "ja esta nos favoritos",
            "ja favoritado",
            "duplicad",
            "duplicate",
            "already exists",
            "already added",
        ),
    ),
    (
        ErrorKind.DELIVERY,
        (
            "falha no envio",
            "falha ao enviar email",
            "emails nao disponiveis",
            "email do adotante nao",
            "email do doador nao",
            "servidor de email",
        ),
    ),
    (
        ErrorKind.VALIDATION,
        (
            "obrigatorios nao fornecidos",
            "compromissos devem ser aceitos",
            "dados invalidos",
            "required",
            "validation",
        ),
    ),
    (
        ErrorKind.FORBIDDEN,
        ("nao tem permissao", "permission denied", "forbidden"),
    ),
    (
        ErrorKind.NOT_FOUND,
        ("nao encontrado", "not found"),
    ),
    (
        ErrorKind.TRANSIENT,
        (
            "network",
            "timeout",
            "timed out",
            "econnrefused",
            "erro de conexao",
            "tente novamente em alguns",
        ),
    ),
)

_STATUS_RULES: dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.SESSION_EXPIRED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.ALREADY_EXISTS,
    408: ErrorKind.TRANSIENT,
    429: ErrorKind.TRANSIENT,
}


def normalize_message(message: str | None) -> str:
    """Lowercase and strip accents so rules can use plain ASCII."""
    decomposed = unicodedata.normalize("NFKD", message or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def classify_remote_error(status_code: int | None, message: str | None) -> ClassifiedError:
    """Classify a remote failure.

    Args:
        status_code: HTTP status, or None when the request never got a response.
        message: Backend message (may be empty).

    Returns:
        ClassifiedError carrying the kind and the raw message.
    """
    raw = message or ""
    # 401 always wins: the session is gone whatever the body says.
    if status_code == 401:
        return ClassifiedError(ErrorKind.SESSION_EXPIRED, raw, status_code)

    normalized = normalize_message(raw)
    for kind, patterns in _MESSAGE_RULES:
        if any(pattern in normalized for pattern in patterns):
            return ClassifiedError(kind, raw, status_code)

    if status_code is None:
        return ClassifiedError(ErrorKind.TRANSIENT, raw, status_code)
    if status_code >= 500:
        return ClassifiedError(ErrorKind.TRANSIENT, raw, status_code)
    kind = _STATUS_RULES.get(status_code, ErrorKind.UNKNOWN)
    return ClassifiedError(kind, raw, status_code)
