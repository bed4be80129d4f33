"""episodeforge data models.

Episodes own an ordered list of scenes; characters are read-only inputs to the
consistency checker. Warnings, analytics reports and batch results are derived
on demand and never persisted by this package.

Every model accepts both snake_case field names and the camelCase keys used by
the dashboard JSON payloads (``promptText``, ``isMain``, ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Generate a fresh entity identifier."""
    return uuid4().hex


class EpisodeForgeModel(BaseModel):
    """Base class for all episodeforge models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_payload(self) -> dict[str, Any]:
        """Dump the model with camelCase keys for JSON output."""
        return self.model_dump(mode="json", by_alias=True)


class EpisodeStatus(str, Enum):
    """Lifecycle status of an episode."""

    DRAFT = "draft"
    COMPLETED = "completed"


class Scene(EpisodeForgeModel):
    """Atomic unit of an episode.

    ``order`` is 1-based inside a placed episode; ``0`` marks a scene that has
    not been positioned yet (for example a scene about to be inserted).
    """

    id: str = Field(default_factory=new_id)
    order: int = Field(default=0, ge=0)
    title: str | None = None
    prompt_text: str = ""
    duration_seconds: float | None = Field(default=None, ge=0)
    generated_image_ref: str | None = None


class Episode(EpisodeForgeModel):
    """An ordered collection of scenes plus metadata."""

    id: str = Field(default_factory=new_id)
    title: str
    status: EpisodeStatus = EpisodeStatus.DRAFT
    category_id: str | None = None
    episode_number: int | None = Field(default=None, ge=1)
    scenes: list[Scene] = Field(default_factory=list)

    def ordered_scenes(self) -> list[Scene]:
        """Return the scenes sorted by their order value."""
        return sorted(self.scenes, key=lambda scene: scene.order)


class Character(EpisodeForgeModel):
    """A channel character as seen by the consistency checker."""

    id: str = Field(default_factory=new_id)
    name: str
    role: str = "host"
    is_main: bool = False
    clothing_keywords: str | None = None
    appearance_keywords: str | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Validate that character name is not empty."""
        if not v or not v.strip():
            raise ValueError("Character name cannot be empty")
        return v.strip()


class Category(EpisodeForgeModel):
    """Episode category (a named series of episodes)."""

    id: str = Field(default_factory=new_id)
    name: str


# Advisory warnings


class QualityWarningKind(str, Enum):
    """Kinds of quality defects detected in generated scene text."""

    DUPLICATE = "duplicate"
    OVERSIZED = "oversized"
    FILLER = "filler"


class QualityWarning(EpisodeForgeModel):
    """A non-blocking quality signal attached to one or more scenes."""

    model_config = ConfigDict(frozen=True)

    kind: QualityWarningKind
    scene_ids: list[str]
    message: str


class ConsistencyWarningKind(str, Enum):
    """Kinds of host continuity drift."""

    OUTFIT_CHANGE = "outfit_change"
    APPEARANCE_MISMATCH = "appearance_mismatch"


class ConsistencyWarning(EpisodeForgeModel):
    """A non-blocking host continuity signal for one scene."""

    model_config = ConfigDict(frozen=True)

    scene_id: str
    scene_order: int
    kind: ConsistencyWarningKind
    message: str


# Analytics


class StructureSegment(EpisodeForgeModel):
    """Scene count and share of one structural section."""

    count: int = 0
    percent: int = 0


class StructureBreakdown(EpisodeForgeModel):
    """Intro / content / call-to-action split of an episode."""

    intro: StructureSegment = Field(default_factory=StructureSegment)
    content: StructureSegment = Field(default_factory=StructureSegment)
    cta: StructureSegment = Field(default_factory=StructureSegment)


class SceneDuration(EpisodeForgeModel):
    """Reference to a scene together with its effective duration."""

    scene_id: str
    order: int
    title: str | None = None
    duration_seconds: float


class AnalyticsReport(EpisodeForgeModel):
    """Duration and structure statistics for an episode."""

    total_scenes: int = 0
    estimated_duration_seconds: float = 0
    avg_scene_duration: float = 0
    structure: StructureBreakdown = Field(default_factory=StructureBreakdown)
    longest_scene: SceneDuration | None = None
    shortest_scene: SceneDuration | None = None


class EpisodeReport(EpisodeForgeModel):
    """All advisory output for one episode, computed together."""

    episode_id: str
    quality: list[QualityWarning] = Field(default_factory=list)
    consistency: list[ConsistencyWarning] = Field(default_factory=list)
    analytics: AnalyticsReport | None = None

    @property
    def warning_count(self) -> int:
        """Total number of advisory warnings."""
        return len(self.quality) + len(self.consistency)


# Generation requests


class VoiceOverMode(str, Enum):
    """How narration and on-camera characters are combined."""

    WITH_HOST = "with_host"
    VOICE_OVER = "voice_over"
    BROLL_ONLY = "broll_only"
    HOST_DYNAMIC_ENV = "host_dynamic_env"
    HOST_STORYTELLER = "host_storyteller"
    CINEMATIC_FILM = "cinematic_film"


class CTAMode(str, Enum):
    """How calls to action are chosen."""

    RANDOM = "random"
    SELECT = "select"


class AdSettings(EpisodeForgeModel):
    """Native ad insertion options."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    product_info: str | None = None
    product_image_url: str | None = None
    product_link: str | None = None
    ad_styles: tuple[str, ...] = ()
    ad_scene_count: int = Field(default=2, ge=1)

    @model_validator(mode="before")
    @classmethod
    def drop_product_when_disabled(cls, data: Any) -> Any:
        """Product details only travel with an enabled ad insertion."""
        if not isinstance(data, dict) or data.get("enabled"):
            return data
        kept = ("ad_scene_count", "adSceneCount", "enabled")
        return {key: value for key, value in data.items() if key in kept}


class GenerationRequest(EpisodeForgeModel):
    """Immutable set of generation options shared by every item of a request.

    The object is built once and passed through unchanged; options that only
    make sense for a particular voice-over mode are normalised away at
    construction time.
    """

    model_config = ConfigDict(frozen=True)

    total_scenes: int = Field(default=10, ge=1)
    style_id: str | None = None
    voice_over_mode: VoiceOverMode = VoiceOverMode.WITH_HOST
    cinematic_style: str | None = None
    voice_gender: str = "auto"
    voice_tone: str = "warm"
    language: str = "vi"

    use_characters: bool = True
    character_ids: tuple[str, ...] = ()
    adapt_characters_to_script: bool = False

    visual_hook_enabled: bool = True
    emotional_curve_enabled: bool = True
    spatial_audio_enabled: bool = True
    storyteller_broll_enabled: bool = False
    dialogue_density_min: int = Field(default=12, ge=0)
    dialogue_density_max: int = Field(default=18, ge=0)

    mention_channel: bool = False
    cta_mode: CTAMode = CTAMode.RANDOM
    selected_ctas: tuple[str, ...] = ()

    ads: AdSettings = Field(default_factory=AdSettings)

    @model_validator(mode="before")
    @classmethod
    def normalise_mode_options(cls, data: Any) -> Any:
        """Clear options that do not apply to the chosen voice-over mode."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        mode = data.get("voice_over_mode", data.get("voiceOverMode"))
        mode = VoiceOverMode(mode) if mode is not None else VoiceOverMode.WITH_HOST

        def _clear(snake: str, value: Any) -> None:
            data.pop(to_camel(snake), None)
            data[snake] = value

        if mode is not VoiceOverMode.CINEMATIC_FILM:
            _clear("cinematic_style", None)
        elif not (data.get("cinematic_style") or data.get("cinematicStyle")):
            _clear("cinematic_style", "cinematic_documentary")
        if mode is not VoiceOverMode.VOICE_OVER:
            _clear("voice_gender", "auto")
            _clear("voice_tone", "warm")
        if mode is not VoiceOverMode.HOST_STORYTELLER:
            _clear("storyteller_broll_enabled", False)
        cta_mode = data.get("cta_mode", data.get("ctaMode", CTAMode.RANDOM))
        if CTAMode(cta_mode) is not CTAMode.SELECT:
            _clear("selected_ctas", ())
        return data

    @model_validator(mode="after")
    def check_dialogue_density(self) -> GenerationRequest:
        """Dialogue density bounds must form a range."""
        if self.dialogue_density_min > self.dialogue_density_max:
            raise ValueError(
                "dialogue_density_min must not exceed dialogue_density_max"
            )
        return self

    def for_item(self, item: BulkItem) -> EpisodeGenerationParams:
        """Bind this request to one batch item."""
        return EpisodeGenerationParams(
            request=self,
            custom_content=item.description,
            category_id=item.category_id,
        )


class EpisodeGenerationParams(EpisodeForgeModel):
    """Everything the script generator needs for one episode."""

    model_config = ConfigDict(frozen=True)

    request: GenerationRequest
    custom_content: str | None = None
    category_id: str | None = None


class SceneGenerationContext(EpisodeForgeModel):
    """Context handed to the script generator when a single scene is needed."""

    model_config = ConfigDict(frozen=True)

    episode_id: str
    episode_title: str
    insert_position: int = Field(ge=1)
    instructions: str
    previous_scene: Scene | None = None
    next_scene: Scene | None = None


# Bulk generation


class BulkItem(EpisodeForgeModel):
    """One requested episode in a batch."""

    description: str
    category_id: str | None = None

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        """Trim surrounding whitespace from the description."""
        return v.strip()


class BulkResult(EpisodeForgeModel):
    """Outcome of one batch item."""

    index: int
    description: str
    succeeded: bool
    episode_ref: str | None = None
    episode_title: str | None = None
    error: str | None = None


class BulkProgress(EpisodeForgeModel):
    """Progress event emitted after each batch item completes."""

    current: int
    total: int
    result: BulkResult

    @property
    def fraction(self) -> float:
        """Completed share of the batch in [0, 1]."""
        return self.current / self.total if self.total else 1.0


class BatchState(str, Enum):
    """Lifecycle of a bulk generation batch."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


__all__ = [
    "AdSettings",
    "AnalyticsReport",
    "BatchState",
    "BulkItem",
    "BulkProgress",
    "BulkResult",
    "CTAMode",
    "Category",
    "Character",
    "ConsistencyWarning",
    "ConsistencyWarningKind",
    "Episode",
    "EpisodeForgeModel",
    "EpisodeGenerationParams",
    "EpisodeReport",
    "EpisodeStatus",
    "GenerationRequest",
    "QualityWarning",
    "QualityWarningKind",
    "Scene",
    "SceneDuration",
    "SceneGenerationContext",
    "StructureBreakdown",
    "StructureSegment",
    "VoiceOverMode",
    "new_id",
]
