"""Tests for the bulk generation orchestrator."""

from unittest.mock import AsyncMock, patch

import pytest

from episodeforge.batch import BulkGenerationOrchestrator, ErrorCategory
from episodeforge.exceptions import GenerationError, ValidationError
from episodeforge.models import (
    BatchState,
    BulkItem,
    Category,
    Episode,
    EpisodeGenerationParams,
    GenerationRequest,
    VoiceOverMode,
)
from episodeforge.storage import InMemoryEpisodeStore


class FakeScriptGenerator:
    """Generator that fails for descriptions containing 'fail'."""

    def __init__(self):
        self.calls: list[EpisodeGenerationParams] = []

    async def generate_episode(self, params):
        self.calls.append(params)
        if "fail" in params.custom_content:
            raise RuntimeError("model overloaded")
        return Episode(title=params.custom_content.title())

    async def generate_scene(self, context):  # pragma: no cover
        raise NotImplementedError


def items(*descriptions: str) -> list[BulkItem]:
    return [BulkItem(description=d) for d in descriptions]


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryEpisodeStore()


@pytest.fixture
def generator():
    """Fake script generator."""
    return FakeScriptGenerator()


@pytest.fixture
def no_sleep():
    """Replace the pause between items."""
    with patch(
        "episodeforge.batch.orchestrator.asyncio.sleep", new_callable=AsyncMock
    ) as sleep:
        yield sleep


class TestRun:
    """Test running a batch."""

    @pytest.mark.asyncio
    async def test_five_items_progress_and_delays(self, store, generator, no_sleep):
        """Five items yield five progress events and four pauses."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        events = [
            (p.current, p.total)
            async for p in orchestrator.run(items("a", "b", "c", "d", "e"))
        ]

        assert events == [(1, 5), (2, 5), (3, 5), (4, 5), (5, 5)]
        assert no_sleep.await_count == 4
        no_sleep.assert_awaited_with(1.0)
        assert orchestrator.state is BatchState.COMPLETED
        assert len(store.episodes) == 5

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_batch(self, store, generator, no_sleep):
        """A failing middle item is recorded and the next item still runs."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        report = await orchestrator.run_to_completion(
            items("pho tour", "fail please", "banh mi")
        )

        assert [r.succeeded for r in orchestrator.results] == [True, False, True]
        assert [p.custom_content for p in generator.calls] == [
            "pho tour",
            "fail please",
            "banh mi",
        ]
        failed = orchestrator.results[1]
        assert "item 2" in failed.error
        assert "model overloaded" in failed.error
        assert report.successful_items == 2
        assert report.failed_items == 1
        assert report.get_error_summary() == {ErrorCategory.GENERATION: [1]}
        assert orchestrator.state is BatchState.COMPLETED

    @pytest.mark.asyncio
    async def test_results_reference_stored_episodes(self, store, generator, no_sleep):
        """Successful results carry the stored episode id and title."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        await orchestrator.run_to_completion(items("pho tour", "banh mi"))

        stored = {e.id: e for e in store.episodes}
        for result in orchestrator.results:
            assert stored[result.episode_ref].title == result.episode_title
        assert sorted(e.episode_number for e in store.episodes) == [1, 2]

    @pytest.mark.asyncio
    async def test_request_is_shared_by_items(self, store, generator, no_sleep):
        """Every item sees the same generation options."""
        request = GenerationRequest(
            total_scenes=6, voice_over_mode=VoiceOverMode.VOICE_OVER
        )
        orchestrator = BulkGenerationOrchestrator(store, generator)

        await orchestrator.run_to_completion(items("a", "b"), request)

        assert all(p.request is request for p in generator.calls)

    @pytest.mark.asyncio
    async def test_item_category_is_applied(self, store, generator, no_sleep):
        """Generated episodes inherit the item's category."""
        category = await store.create_category("Food")
        orchestrator = BulkGenerationOrchestrator(store, generator)

        await orchestrator.run_to_completion(
            [BulkItem(description="pho", category_id=category.id)]
        )

        assert store.episodes[0].category_id == category.id

    @pytest.mark.asyncio
    async def test_storage_failure_is_categorized(self, generator, no_sleep):
        """Store failures are recorded under the storage category."""
        store = AsyncMock()
        store.create_episode.side_effect = OSError("disk full")
        orchestrator = BulkGenerationOrchestrator(store, generator)

        report = await orchestrator.run_to_completion(items("a"))

        assert report.get_error_summary() == {ErrorCategory.STORAGE: [0]}
        assert "disk full" in orchestrator.results[0].error

    @pytest.mark.asyncio
    async def test_dict_results_are_validated(self, store, no_sleep):
        """Generators may return plain dictionaries."""
        generator = AsyncMock()
        generator.generate_episode.return_value = {"title": "From Dict"}
        orchestrator = BulkGenerationOrchestrator(store, generator)

        await orchestrator.run_to_completion(items("a"))

        assert orchestrator.results[0].episode_title == "From Dict"

    @pytest.mark.asyncio
    async def test_single_item_never_sleeps(self, store, generator, no_sleep):
        """No pause follows the last item."""
        orchestrator = BulkGenerationOrchestrator(store, generator, item_delay=0.5)

        await orchestrator.run_to_completion(items("only"))

        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_progress_callback(self, store, generator, no_sleep):
        """run_to_completion forwards every progress event."""
        seen = []
        orchestrator = BulkGenerationOrchestrator(store, generator)

        await orchestrator.run_to_completion(
            items("a", "fail", "c"), progress_callback=seen.append
        )

        assert [p.current for p in seen] == [1, 2, 3]
        assert [p.result.succeeded for p in seen] == [True, False, True]
        assert seen[-1].fraction == 1.0


class TestValidation:
    """Test batch validation and lifecycle."""

    @pytest.mark.asyncio
    async def test_empty_batch(self, store, generator):
        """An empty batch is rejected before any call."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        with pytest.raises(ValidationError, match="no items"):
            await orchestrator.run_to_completion([])

        assert generator.calls == []
        assert orchestrator.state is BatchState.IDLE

    @pytest.mark.asyncio
    async def test_blank_description(self, store, generator):
        """Items must have a description."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        with pytest.raises(ValidationError, match="Item 2"):
            await orchestrator.run_to_completion(items("a", "   "))

        assert generator.calls == []

    @pytest.mark.asyncio
    async def test_orchestrator_runs_once(self, store, generator, no_sleep):
        """A second run on the same orchestrator is rejected."""
        orchestrator = BulkGenerationOrchestrator(store, generator)
        await orchestrator.run_to_completion(items("a"))

        with pytest.raises(ValidationError, match="already been started"):
            await orchestrator.run_to_completion(items("b"))


class TestCancel:
    """Test cooperative cancellation."""

    @pytest.mark.asyncio
    async def test_cancel_stops_at_item_boundary(self, store, generator, no_sleep):
        """Items after the cancel point are never attempted."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        async for progress in orchestrator.run(items("a", "b", "c", "d", "e")):
            if progress.current == 2:
                orchestrator.cancel()

        assert len(orchestrator.results) == 2
        assert len(generator.calls) == 2
        assert no_sleep.await_count == 1
        assert orchestrator.state is BatchState.CANCELLED
        assert orchestrator.report.to_dict()["state"] == "cancelled"

    @pytest.mark.asyncio
    async def test_cancel_after_last_item_completes(self, store, generator, no_sleep):
        """Cancelling once every item ran still counts as completed."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        async for progress in orchestrator.run(items("a", "b")):
            if progress.current == 2:
                orchestrator.cancel()

        assert orchestrator.state is BatchState.COMPLETED

    @pytest.mark.asyncio
    async def test_abandoned_iteration_is_cancelled(self, store, generator, no_sleep):
        """Closing the iterator early ends the batch as cancelled."""
        orchestrator = BulkGenerationOrchestrator(store, generator)
        progress_iter = orchestrator.run(items("a", "b", "c"))

        await anext(progress_iter)
        await progress_iter.aclose()

        assert orchestrator.state is BatchState.CANCELLED
        assert orchestrator.report.processed_items == 1

    @pytest.mark.asyncio
    async def test_cancel_when_finished_is_ignored(self, store, generator, no_sleep):
        """Cancelling a finished batch changes nothing."""
        orchestrator = BulkGenerationOrchestrator(store, generator)
        await orchestrator.run_to_completion(items("a"))

        orchestrator.cancel()

        assert orchestrator.state is BatchState.COMPLETED


class TestAutoItems:
    """Test the idea-generation pre-step."""

    @pytest.mark.asyncio
    async def test_ideas_become_items_in_new_category(self, store, generator):
        """Ideas are truncated to the count and share a new category."""
        ideas = AsyncMock()
        ideas.generate_ideas.return_value = ["Pho", "  ", "Banh mi", "Bun cha", "Extra"]
        orchestrator = BulkGenerationOrchestrator(store, generator, ideas)

        prepared = await orchestrator.prepare_auto_items("Hanoi food", 4)

        ideas.generate_ideas.assert_awaited_once_with("Hanoi food", 4)
        assert [i.description for i in prepared] == ["Pho", "Banh mi", "Bun cha"]
        assert [c.name for c in store.categories] == ["Hanoi food"]
        assert {i.category_id for i in prepared} == {store.categories[0].id}

    @pytest.mark.asyncio
    async def test_explicit_category_name(self, store, generator):
        """A category name overrides the topic as the category name."""
        ideas = AsyncMock()
        ideas.generate_ideas.return_value = ["Pho"]
        orchestrator = BulkGenerationOrchestrator(store, generator, ideas)

        await orchestrator.prepare_auto_items("Hanoi food", 1, category_name="Series 1")

        assert [c.name for c in store.categories] == ["Series 1"]

    @pytest.mark.asyncio
    async def test_existing_category_is_kept(self, store, generator):
        """No category is created when an item already has one."""
        ideas = AsyncMock()
        ideas.generate_ideas.return_value = ["Pho"]
        orchestrator = BulkGenerationOrchestrator(store, generator, ideas)
        category = Category(name="Mine")

        prepared = await orchestrator.prepare_auto_items(
            "food", 1, items=[BulkItem(description="Mine", category_id=category.id)]
        )

        assert store.categories == []
        assert [i.description for i in prepared] == ["Mine", "Pho"]

    @pytest.mark.asyncio
    async def test_idea_failure_aborts_before_batch(self, store, generator):
        """A failing idea generator raises and nothing is generated."""
        ideas = AsyncMock()
        ideas.generate_ideas.side_effect = RuntimeError("timeout")
        orchestrator = BulkGenerationOrchestrator(store, generator, ideas)

        with pytest.raises(GenerationError) as exc_info:
            await orchestrator.prepare_auto_items("food", 3)

        assert exc_info.value.collaborator == "idea_generator"
        assert generator.calls == []
        assert store.categories == []
        assert orchestrator.state is BatchState.IDLE

    @pytest.mark.asyncio
    async def test_no_ideas(self, store, generator):
        """An empty idea list is an error."""
        ideas = AsyncMock()
        ideas.generate_ideas.return_value = []
        orchestrator = BulkGenerationOrchestrator(store, generator, ideas)

        with pytest.raises(GenerationError, match="no ideas"):
            await orchestrator.prepare_auto_items("food", 3)

    @pytest.mark.asyncio
    async def test_missing_idea_generator(self, store, generator):
        """Auto mode needs an idea generator."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        with pytest.raises(GenerationError, match="No idea generator"):
            await orchestrator.prepare_auto_items("food", 3)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("topic", "count"), [("  ", 3), ("food", 0)])
    async def test_invalid_arguments(self, store, generator, topic, count):
        """Blank topics and non-positive counts are rejected."""
        orchestrator = BulkGenerationOrchestrator(store, generator, AsyncMock())

        with pytest.raises(ValidationError):
            await orchestrator.prepare_auto_items(topic, count)


class TestReport:
    """Test the batch report."""

    @pytest.mark.asyncio
    async def test_to_dict(self, store, generator, no_sleep):
        """The report serializes counts, results and errors."""
        orchestrator = BulkGenerationOrchestrator(store, generator)

        data = (await orchestrator.run_to_completion(items("a", "fail"))).to_dict()

        assert data["state"] == "completed"
        assert data["total_items"] == 2
        assert data["processed_items"] == 2
        assert data["successful_items"] == 1
        assert data["failed_items"] == 1
        assert data["results"][0]["episodeRef"] is not None
        assert data["errors"][1]["category"] == "generation"
        assert data["errors"][1]["description"] == "fail"
        assert data["duration_seconds"] >= 0
