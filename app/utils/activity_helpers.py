from sqlalchemy.ext.asyncio import AsyncSession
from app.models.support.activity_models import UserActivity
from app.constants.activity_templates import ACTIVITY_TEMPLATES
from app.constants.activity_codes import ActivityCode


async def emit_activity(
    db: AsyncSession,
    *,
    actor,
    code: ActivityCode,
    **context,
):
    """Stage one activity line in the caller's transaction (no commit here)."""
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        message = template.format(
            actor_role=actor.role.capitalize(),
            actor_name=actor.username,
            **context,
        )
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )

    db.add(
        UserActivity(
            user_id=actor.id,
            username_snapshot=actor.username,
            code=code.value,
            message=message,
        )
    )
