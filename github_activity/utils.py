import asyncio

from typing import Any, Callable, Awaitable, Sequence


async def async_execute(
        func: Callable[..., Awaitable],
        args_list: Sequence[Sequence[Any]],
        max_workers: int = 10
) -> list[Any]:
    """
    Executes passed coroutine function concurrently using args_list arguments.
    It creates up to max_workers tasks, which go over all elements of
    args_list and execute func with every args. Waits for every call to
    finish before returning.

    Parameters
    ----------
    func: Callable[..., Awaitable]
        Coroutine function to execute with given list of args.
    args_list: Sequence[Sequence[Any]]
        List of arguments to parameterize func.
    max_workers: int
        Maximum number of concurrent tasks working on the execution.

    Returns
    ----------
    list[Any]
        Result of every func call, in the order of args_list.
    """
    if max_workers < 1:
        raise ValueError("max_workers must be a positive number.")
    if not args_list:
        return []
    queue = asyncio.Queue()
    for position, args in enumerate(args_list):
        queue.put_nowait((position, args))
    results: list[Any] = [None] * len(args_list)

    async def _worker():
        while not queue.empty():
            position, args = queue.get_nowait()
            results[position] = await func(*args)

    workers_count = min(max_workers, len(args_list))
    tasks = [asyncio.create_task(_worker()) for _ in range(workers_count)]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return results
