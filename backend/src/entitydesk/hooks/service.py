"""Hook invocation for the entity lifecycle pipelines.

Hooks may be plain functions or coroutine functions. Pre-commit hooks
propagate their errors so the pipeline can abort; post-commit hooks are
best-effort and their failures are only logged.
"""

import inspect
import logging
from typing import Any

from entitydesk.hooks.registry import HookFn

logger = logging.getLogger(__name__)


async def call_hook(hook_fn: HookFn, props: Any) -> Any:
    """Invoke a hook, awaiting its result if it returned an awaitable."""
    result = hook_fn(props)
    if inspect.isawaitable(result):
        result = await result
    return result


async def run_post_commit_hook(name: str, hook_fn: HookFn | None, props: Any) -> bool:
    """Invoke a hook that runs after the data source has committed.

    Args:
        name: Hook point name, used in log messages
        hook_fn: The hook, or None if the schema does not define it
        props: EntitySaveProps or EntityDeleteProps

    Returns:
        True if the hook ran without raising (or was not defined)
    """
    if hook_fn is None:
        return True
    try:
        await call_hook(hook_fn, props)
    except Exception as e:
        # Already committed: nothing to roll back
        logger.error(
            "%s hook failed for %s/%s: %s",
            name,
            props.collection_path,
            props.id,
            e,
        )
        return False
    return True
