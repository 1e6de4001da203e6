"""Background generator - throttling, retries and error classification."""

import logging
import threading
import time
from typing import Callable

from .. import config
from ..errors import ContentRejected, GenerationCancelled, GenerationFailed, RateLimited
from ..models.fixture import Fixture
from ..models.styles import CompositionMode, RenderStyle, select_template
from .base import BackgroundPrompt, BackgroundTransport, GeneratedImage, UpstreamError
from .throttle import RateLimiter

logger = logging.getLogger(__name__)


class BackgroundGenerator:
    """Requests poster backgrounds from a transport (inline Gemini or backend).

    Rate-limit responses are retried up to `max_retries` times, waiting for
    the upstream retry hint when there is one, otherwise backing off
    exponentially. Safety rejections and other errors are not retried.
    """

    def __init__(
        self,
        transport: BackgroundTransport,
        limiter: RateLimiter,
        max_retries: int = config.MAX_RATE_LIMIT_RETRIES,
        backoff_base: float = config.BACKOFF_BASE,
        backoff_cap: float = config.BACKOFF_CAP,
        max_total_wait: float = config.MAX_RETRY_WAIT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.limiter = limiter
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self.max_total_wait = max_total_wait
        self._sleep = sleep

    def generate(
        self,
        fixture: Fixture,
        style: RenderStyle = RenderStyle.STADIUM,
        cancel: threading.Event | None = None,
    ) -> GeneratedImage:
        """Generate a classic poster background for one fixture."""
        template = select_template(style, CompositionMode.CLASSIC)
        prompt = BackgroundPrompt(
            template_id=template.id,
            text=template.render(home=fixture.home.name, away=fixture.away.name),
            style=style,
            home=fixture.home.name,
            away=fixture.away.name,
            aspect_ratio=template.aspect_ratio,
        )
        logger.info(f"Generating {style.value} background for {fixture.home.name} vs {fixture.away.name}")
        return self._dispatch_with_retry(prompt, cancel)

    def generate_program(
        self,
        match_count: int,
        style: RenderStyle = RenderStyle.STADIUM,
        cancel: threading.Event | None = None,
    ) -> GeneratedImage:
        """Generate a program poster background for `match_count` fixtures."""
        template = select_template(style, CompositionMode.PROGRAM)
        prompt = BackgroundPrompt(
            template_id=template.id,
            text=template.render(match_count=match_count),
            style=style,
            mode=CompositionMode.PROGRAM,
            match_count=match_count,
            aspect_ratio=template.aspect_ratio,
        )
        logger.info(f"Generating program background for {match_count} matches")
        return self._dispatch_with_retry(prompt, cancel)

    def backoff_delay(self, retry: int) -> float:
        """Delay before retry number `retry` (1-based) without a hint: 5s, 10s, 20s... capped."""
        return min(self.backoff_base * 2 ** (retry - 1), self.backoff_cap)

    def _dispatch_with_retry(self, prompt: BackgroundPrompt, cancel: threading.Event | None) -> GeneratedImage:
        retries = 0
        waited = 0.0

        while True:
            if cancel is not None and cancel.is_set():
                raise GenerationCancelled("Background generation cancelled")

            self.limiter.acquire()
            try:
                image = self.transport.dispatch(prompt)
            except UpstreamError as e:
                if e.safety_blocked:
                    raise ContentRejected(
                        f"Content blocked by safety filters, try a different style ({e.message})"
                    ) from e
                if not e.rate_limited:
                    raise GenerationFailed(e.message) from e
                if retries >= self.max_retries:
                    raise RateLimited(
                        "Rate limit exceeded. Please wait a moment and try again.",
                        attempts=retries + 1,
                        retry_after=e.retry_after,
                    ) from e

                retries += 1
                delay = e.retry_after if e.retry_after is not None else self.backoff_delay(retries)
                if waited + delay > self.max_total_wait:
                    raise RateLimited(
                        f"Rate limit retry budget exhausted ({waited:.0f}s waited)",
                        attempts=retries,
                        retry_after=delay,
                    ) from e

                logger.warning(
                    f"Rate limited ({prompt.template_id}); retry {retries}/{self.max_retries} in {delay:.1f}s"
                )
                self._wait(delay, cancel)
                waited += delay
                continue

            logger.info(f"Generated background ({len(image.data)} bytes, {image.mime_type})")
            return image

    def _wait(self, delay: float, cancel: threading.Event | None) -> None:
        if cancel is None:
            self._sleep(delay)
        elif cancel.wait(delay):
            raise GenerationCancelled("Background generation cancelled while waiting to retry")
