"""Drive a submit-once, poll-until-done recognition job."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from ..config import POLL_INTERVAL_SECONDS
from ..errors import RemoteOperationFailed
from ..models import OperationStatus, ProgressEvent, RecognitionRequest
from .base import SpeechProvider

logger = logging.getLogger(__name__)


class RemoteOperationPoller:
    """Turns one remote recognition job into a stream of progress events.

    The stream is lazy: the job is submitted when iteration starts, and each
    step performs at most one poll. A non-terminal event is only emitted when
    the reported percentage changes. The stream ends with a single terminal
    event carrying the recognized words, or raises ``RemoteOperationFailed``
    if the job faulted. Polls are spaced by a fixed ``interval``.

    A poller drives exactly one job; call ``start()`` once.
    """

    def __init__(
        self,
        speech: SpeechProvider,
        request: RecognitionRequest,
        *,
        interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._speech = speech
        self._request = request
        self._interval = interval
        self._sleep = sleep
        self._started = False
        self.polls = 0

    def start(self) -> AsyncIterator[ProgressEvent]:
        if self._started:
            raise RuntimeError("RemoteOperationPoller instances drive a single job")
        self._started = True
        return self._run()

    async def _run(self) -> AsyncIterator[ProgressEvent]:
        handle = await self._speech.submit(self._request)
        logger.debug("Submitted recognition job for %s", self._request.audio_location)

        status: OperationStatus | None = None
        last_emitted: int | None = None
        while True:
            if status is not None and status.done:
                if status.faulted:
                    raise RemoteOperationFailed(status.error or "unknown error")
                yield ProgressEvent(
                    percent_complete=100, is_terminal=True, words=tuple(status.words)
                )
                return

            if status is not None:
                await self._sleep(self._interval)

            status = await self._speech.poll_once(handle)
            self.polls += 1

            if not status.done and status.percent_complete != last_emitted:
                last_emitted = status.percent_complete
                yield ProgressEvent(percent_complete=status.percent_complete)
