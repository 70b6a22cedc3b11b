import hmac

from sqlalchemy.orm import Session

from giteahook.repositories.tracking import ProjectRepository


def check_webhook_token(db: Session, project_id: int, token: str) -> bool:
    """Compare token with the project's webhook token in constant time.

    Returns False if the project is unknown or has no token configured.
    """
    expected = ProjectRepository().get_webhook_token(db, project_id)
    if not expected or not token:
        return False
    return hmac.compare_digest(expected, token)

