"""entitydesk lifecycle hooks.

Schemas attach hooks at five points of the save/delete lifecycle:
- onPreSave: Before persisting (returns the values to save, can abort)
- onSaveSuccess: After a successful write (best-effort)
- onSaveFailure: After a failed write (best-effort)
- onPreDelete: Before deleting (can abort)
- onDelete: After a successful delete (best-effort)

Declarative schemas reference hooks by registered name:

    from entitydesk.hooks import hook

    @hook("stampPublishedAt")
    def stamp_published_at(props):
        return {**props.values, "publishedAt": datetime.now(timezone.utc)}
"""

from entitydesk.hooks.registry import HOOK_POINTS, HookFn, HookRegistration, HookRegistry, hook
from entitydesk.hooks.service import call_hook, run_post_commit_hook

__all__ = [
    "HOOK_POINTS",
    "HookFn",
    "HookRegistration",
    "HookRegistry",
    "call_hook",
    "hook",
    "run_post_commit_hook",
]
