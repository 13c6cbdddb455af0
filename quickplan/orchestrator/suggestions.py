"""
Suggestion cache for LLM-derived option lists.

Holds per-destination activity and community suggestions. Each instance
owns its own caches and pending-task tables, so separate sessions or test
runs never share results unless they share the instance.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Any, List, Optional

from quickplan.orchestrator.config import OrchestratorConfig, DEFAULT_CONFIG
from quickplan.orchestrator.prompts import (
    build_activity_suggestion_messages,
    build_community_suggestion_messages,
)
from quickplan.orchestrator.response_parser import ParseError, parse_option_list
from quickplan.shared.llm.client import request_chat_completion


logger = logging.getLogger(__name__)

# (messages, temperature) -> reply text
ChatFn = Callable[[List[Dict[str, str]], float], Awaitable[str]]

# Returned when an activity suggestion fetch fails
DEFAULT_ACTIVITIES: List[Dict[str, Any]] = [
    {"id": "beach", "label": "Beach Days", "icon": "🏖️"},
    {"id": "swimming", "label": "Swimming", "icon": "🏊"},
    {"id": "nature", "label": "Nature", "icon": "🌿"},
    {"id": "hiking", "label": "Hiking", "icon": "🥾"},
    {"id": "cultural", "label": "Cultural", "icon": "🏛️"},
    {"id": "food_tour", "label": "Food Tours", "icon": "🍽️"},
    {"id": "adventure", "label": "Adventure", "icon": "🧗"},
    {"id": "spa_wellness", "label": "Spa & Wellness", "icon": "💆"},
    {"id": "photography", "label": "Photography", "icon": "📸"},
    {"id": "nightlife", "label": "Nightlife", "icon": "🎉"},
]

# Offered by the activities question when nothing is cached
UNIVERSAL_ACTIVITIES: List[Dict[str, Any]] = [
    {"id": "beach", "label": "Beach Days", "icon": "🏖️"},
    {"id": "swimming", "label": "Swimming", "icon": "🏊"},
    {"id": "snorkel", "label": "Snorkeling", "icon": "🤿"},
    {"id": "wildlife", "label": "Wildlife", "icon": "🐋"},
    {"id": "nature", "label": "Nature", "icon": "🌿"},
    {"id": "hiking", "label": "Hiking", "icon": "🥾"},
    {"id": "cultural", "label": "Cultural", "icon": "🏛️"},
    {"id": "food_tour", "label": "Food Tours", "icon": "🍽️"},
    {"id": "adventure", "label": "Adventure", "icon": "🧗"},
    {"id": "spa_wellness", "label": "Spa & Wellness", "icon": "💆"},
    {"id": "surf", "label": "Surfing", "icon": "🏄"},
    {"id": "dive", "label": "Scuba Diving", "icon": "🐠"},
    {"id": "golf", "label": "Golf", "icon": "⛳"},
    {"id": "photography", "label": "Photography", "icon": "📸"},
]


def cache_key(destination: str) -> str:
    return destination.strip().lower()


class SuggestionCache:
    """
    Memoized, de-duplicated suggestion fetches keyed by destination.

    Successful parses are cached. Failures (timeout, malformed output,
    empty list) return a fallback for that call only and leave the key
    eligible for a later fetch.
    """

    def __init__(
        self,
        chat: Optional[ChatFn] = None,
        config: OrchestratorConfig = DEFAULT_CONFIG,
    ):
        self.config = config
        self._chat = chat or self._default_chat
        self._activities: Dict[str, List[Dict[str, Any]]] = {}
        self._communities: Dict[str, List[Dict[str, Any]]] = {}
        self._pending: Dict[str, "asyncio.Task[List[Dict[str, Any]]]"] = {}

    async def _default_chat(self, messages: List[Dict[str, str]], temperature: float) -> str:
        return await request_chat_completion(
            messages, temperature=temperature, model=self.config.model
        )

    # -------------------------------------------------------------------------
    # Cache access
    # -------------------------------------------------------------------------

    def cached_activities(self, destination: str) -> Optional[List[Dict[str, Any]]]:
        cached = self._activities.get(cache_key(destination))
        return [dict(option) for option in cached] if cached else None

    def cached_communities(self, destination: str) -> Optional[List[Dict[str, Any]]]:
        cached = self._communities.get(cache_key(destination))
        return [dict(option) for option in cached] if cached else None

    def reset(self) -> None:
        """Drop every cached result and forget pending fetches."""
        self._activities.clear()
        self._communities.clear()
        self._pending.clear()

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def _fetch(
        self,
        kind: str,
        destination: str,
        messages: List[Dict[str, str]],
        store: Dict[str, List[Dict[str, Any]]],
        fallback: List[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        key = cache_key(destination)
        try:
            raw = await asyncio.wait_for(
                self._chat(messages, self.config.suggestion_temperature),
                timeout=self.config.suggestion_timeout,
            )
            options = parse_option_list(raw)
            store[key] = options
            logger.info(
                f"[suggestions] Cached {kind} | destination={key} | count={len(options)}"
            )
            return [dict(option) for option in options]
        except (ParseError, asyncio.TimeoutError) as e:
            logger.warning(f"[suggestions] {kind} fetch unusable for {key}: {e}")
        except Exception as e:
            logger.error(f"[suggestions] {kind} fetch failed for {key}: {e}")
        finally:
            self._pending.pop(f"{kind}:{key}", None)
        return [dict(option) for option in fallback]

    def _start(
        self,
        kind: str,
        destination: str,
        messages: List[Dict[str, str]],
        store: Dict[str, List[Dict[str, Any]]],
        fallback: List[Dict[str, Any]],
    ) -> "asyncio.Task[List[Dict[str, Any]]]":
        pending_key = f"{kind}:{cache_key(destination)}"
        task = self._pending.get(pending_key)
        if task is None:
            task = asyncio.ensure_future(
                self._fetch(kind, destination, messages, store, fallback)
            )
            self._pending[pending_key] = task
        return task

    async def get_activities(self, destination: str) -> List[Dict[str, Any]]:
        """
        Activity suggestions for a destination.

        Returns the cached list, joins an in-flight fetch, or starts one.
        """
        cached = self.cached_activities(destination)
        if cached:
            return cached
        task = self._start(
            "activities",
            destination,
            build_activity_suggestion_messages(destination),
            self._activities,
            DEFAULT_ACTIVITIES,
        )
        return [dict(option) for option in await asyncio.shield(task)]

    async def get_communities(self, destination: str) -> List[Dict[str, Any]]:
        """Community suggestions for a destination; empty list on failure."""
        cached = self.cached_communities(destination)
        if cached:
            return cached
        task = self._start(
            "communities",
            destination,
            build_community_suggestion_messages(destination),
            self._communities,
            [],
        )
        return [dict(option) for option in await asyncio.shield(task)]

    async def wait_pending(self, kind: str, destination: str) -> None:
        """Await an in-flight fetch for this destination, if any. Never starts one."""
        task = self._pending.get(f"{kind}:{cache_key(destination)}")
        if task is not None:
            await asyncio.shield(task)

    def prefetch(self, destination: str) -> bool:
        """
        Schedule both fetches without awaiting them.

        Only possible while an event loop is running; otherwise a no-op.

        Returns:
            True if fetches were scheduled
        """
        if not destination.strip():
            return False
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"[suggestions] No running loop, skipping prefetch for {destination}")
            return False

        if not self.cached_activities(destination):
            self._start(
                "activities",
                destination,
                build_activity_suggestion_messages(destination),
                self._activities,
                DEFAULT_ACTIVITIES,
            )
        if not self.cached_communities(destination):
            self._start(
                "communities",
                destination,
                build_community_suggestion_messages(destination),
                self._communities,
                [],
            )
        return True
