"""Sequential bulk episode generation.

Items are generated strictly one after another, in submission order, with a
fixed pause between consecutive items to stay under the script generator's
rate limits. A failing item is recorded and the batch moves on; there are no
retries.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Sequence

from episodeforge.config import EpisodeForgeSettings, get_logger, get_settings
from episodeforge.exceptions import EpisodeForgeError, GenerationError, ValidationError
from episodeforge.models import (
    BatchState,
    BulkItem,
    BulkProgress,
    BulkResult,
    Episode,
    GenerationRequest,
)
from episodeforge.types import BulkIdeaGenerator, EpisodeStore, ScriptGenerator

from .report import BulkBatchReport, ErrorCategory

logger = get_logger(__name__)


class BulkGenerationOrchestrator:
    """Drives a script generator over a batch of requested episodes.

    An orchestrator runs a single batch. Progress is observed by iterating
    :meth:`run`; the final results stay available through :attr:`results` and
    :attr:`report` once the iteration ends.
    """

    def __init__(
        self,
        store: EpisodeStore,
        generator: ScriptGenerator,
        idea_generator: BulkIdeaGenerator | None = None,
        settings: EpisodeForgeSettings | None = None,
        item_delay: float | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Episode store receiving every generated episode
            generator: Script generator called once per item
            idea_generator: Optional idea generator for the auto pre-step
            settings: Optional settings; the global settings are used otherwise
            item_delay: Seconds to wait between items, overriding the settings
        """
        self.store = store
        self.generator = generator
        self.idea_generator = idea_generator
        self.settings = settings or get_settings()
        self.item_delay = (
            item_delay
            if item_delay is not None
            else self.settings.bulk_item_delay_seconds
        )
        self._state = BatchState.IDLE
        self._cancel_requested = False
        self._report = BulkBatchReport()

    @property
    def state(self) -> BatchState:
        """Current lifecycle state."""
        return self._state

    @property
    def results(self) -> list[BulkResult]:
        """Per-item results recorded so far, in submission order."""
        return list(self._report.results)

    @property
    def report(self) -> BulkBatchReport:
        """Aggregated batch report."""
        return self._report

    def cancel(self) -> None:
        """Stop the batch at the next item boundary.

        The item in flight is allowed to finish; its result is kept.
        """
        if self._state in (BatchState.COMPLETED, BatchState.CANCELLED):
            return
        self._cancel_requested = True
        logger.info("Bulk generation cancellation requested", state=self._state)

    async def prepare_auto_items(
        self,
        topic: str,
        count: int,
        category_name: str | None = None,
        items: Sequence[BulkItem] | None = None,
    ) -> list[BulkItem]:
        """Synthesize batch items from a topic.

        Asks the idea generator for ``count`` descriptions and appends them to
        ``items``. When no item carries a category, one category named
        ``category_name`` (or the topic) is created and assigned to all items.

        Args:
            topic: Main topic handed to the idea generator
            count: Number of descriptions to request
            category_name: Optional name for the auto-created category
            items: Items already requested by the caller

        Returns:
            The complete item list, ready for :meth:`run`

        Raises:
            ValidationError: If the topic is blank or count is below 1
            GenerationError: If the idea generator or the store fails
        """
        if not topic or not topic.strip():
            raise ValidationError(
                "Bulk topic cannot be empty",
                hint="Provide the main topic episodes should be generated about",
            )
        if count < 1:
            raise ValidationError(
                f"Invalid idea count: {count}", hint="Request at least one idea"
            )
        if self.idea_generator is None:
            raise GenerationError(
                "No idea generator configured", collaborator="idea_generator"
            )

        topic = topic.strip()
        try:
            ideas = await self.idea_generator.generate_ideas(topic, count)
        except EpisodeForgeError:
            raise
        except Exception as e:
            raise GenerationError(
                f"Idea generation failed for topic '{topic}'",
                collaborator="idea_generator",
                original_error=e,
            ) from e

        prepared = list(items or [])
        prepared.extend(
            BulkItem(description=idea) for idea in list(ideas)[:count] if idea.strip()
        )
        if not prepared:
            raise GenerationError(
                f"Idea generator returned no ideas for topic '{topic}'",
                collaborator="idea_generator",
            )

        if not any(item.category_id for item in prepared):
            name = (category_name or "").strip() or topic
            try:
                category = await self.store.create_category(name)
            except EpisodeForgeError:
                raise
            except Exception as e:
                raise GenerationError(
                    f"Could not create category '{name}'",
                    collaborator="episode_store",
                    original_error=e,
                ) from e
            logger.info("Created bulk category", category_id=category.id, name=name)
            prepared = [
                item.model_copy(update={"category_id": category.id})
                for item in prepared
            ]

        logger.debug("Prepared bulk items", topic=topic, count=len(prepared))
        return prepared

    async def run(
        self,
        items: Sequence[BulkItem],
        request: GenerationRequest | None = None,
    ) -> AsyncIterator[BulkProgress]:
        """Generate every item and yield a progress event after each one.

        Args:
            items: Requested episodes, processed in this order
            request: Generation options shared by all items

        Yields:
            One ``BulkProgress`` per processed item

        Raises:
            ValidationError: If the batch is empty, an item has no description,
                or this orchestrator has already run
        """
        if self._state is not BatchState.IDLE:
            raise ValidationError(
                "This batch has already been started",
                hint="Create a new orchestrator for another batch",
                details={"state": self._state.value},
            )
        batch = self._validate_items(items)
        request = request or GenerationRequest()
        total = len(batch)

        self._report = BulkBatchReport(total_items=total)
        self._set_state(BatchState.RUNNING)
        logger.info("Starting bulk generation", total=total, delay=self.item_delay)

        try:
            for index, item in enumerate(batch):
                if self._cancel_requested:
                    break
                result = await self._process_item(index, item, request)
                yield BulkProgress(current=index + 1, total=total, result=result)
                if index < total - 1 and not self._cancel_requested:
                    await asyncio.sleep(self.item_delay)
        finally:
            # Also runs when the caller abandons the iteration
            if self._report.processed_items == total:
                self._finish(BatchState.COMPLETED)
            else:
                self._finish(BatchState.CANCELLED)

    async def run_to_completion(
        self,
        items: Sequence[BulkItem],
        request: GenerationRequest | None = None,
        progress_callback: Callable[[BulkProgress], None] | None = None,
    ) -> BulkBatchReport:
        """Run the whole batch and return its report."""
        async for progress in self.run(items, request):
            if progress_callback:
                progress_callback(progress)
        return self._report

    def _validate_items(self, items: Sequence[BulkItem]) -> list[BulkItem]:
        batch = list(items)
        if not batch:
            raise ValidationError(
                "Bulk batch has no items",
                hint="Add at least one episode description",
            )
        for index, item in enumerate(batch):
            if not item.description:
                raise ValidationError(
                    f"Item {index + 1} has an empty description",
                    details={"index": index},
                )
        return batch

    async def _process_item(
        self, index: int, item: BulkItem, request: GenerationRequest
    ) -> BulkResult:
        """Generate and store one episode, recording the outcome."""
        logger.debug("Generating bulk item", index=index, description=item.description)
        try:
            episode = await self.generator.generate_episode(request.for_item(item))
            if not isinstance(episode, Episode):
                episode = Episode.model_validate(episode)
        except Exception as e:
            error = GenerationError(
                f"Generation failed for item {index + 1}: {e}",
                collaborator="script_generator",
                item_index=index,
                original_error=e,
            )
            logger.warning(
                "Bulk item failed", index=index, stage="generate", error=str(e)
            )
            return self._report.add_failure(
                index, item.description, error, ErrorCategory.GENERATION
            )

        try:
            if episode.category_id is None and item.category_id:
                episode = episode.model_copy(update={"category_id": item.category_id})
            stored = await self.store.create_episode(episode)
        except Exception as e:
            error = GenerationError(
                f"Storing episode failed for item {index + 1}: {e}",
                collaborator="episode_store",
                item_index=index,
                original_error=e,
            )
            logger.warning("Bulk item failed", index=index, stage="store", error=str(e))
            return self._report.add_failure(
                index, item.description, error, ErrorCategory.STORAGE
            )

        logger.info(
            "Bulk item generated",
            index=index,
            episode_id=stored.id,
            episode_number=stored.episode_number,
        )
        return self._report.add_success(
            index, item.description, stored.id, stored.title
        )

    def _set_state(self, state: BatchState) -> None:
        self._state = state
        self._report.state = state

    def _finish(self, state: BatchState) -> None:
        self._state = state
        self._report.finish(state)
        logger.info(
            "Bulk generation finished",
            state=state.value,
            succeeded=self._report.successful_items,
            failed=self._report.failed_items,
            total=self._report.total_items,
        )
