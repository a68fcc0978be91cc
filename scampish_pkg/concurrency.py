"""
Fan-out helper used by the builder and the renderer.
"""

import asyncio


def _first_error(group):
    error = group.exceptions[0]
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


async def gather_all(coros):
    """
    Run coroutines concurrently inside a task group and return their results.

    If any of them fails the others are cancelled and the first failure is
    re-raised on its own, so nested fan-outs still surface a single error.
    """
    tasks = []
    try:
        async with asyncio.TaskGroup() as group:
            for coro in coros:
                tasks.append(group.create_task(coro))
    except BaseExceptionGroup as group_error:
        error = _first_error(group_error)
        # Hide the group but keep any explicit cause of the error itself.
        error.__suppress_context__ = True
        raise error
    return [task.result() for task in tasks]
