"""Dataclass models representing stored records and derived aggregates.

These are plain Python objects – not ORM models.  Both store backends
serialise / deserialise to and from these types.

``New*`` records are what callers hand to a store: they carry no id and no
derived fields, and they validate themselves on construction.  Stored records
are built from them with ``from_new()``, which is the only place derived
fields (provider, sizes, component count) are computed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlparse

from backend.errors import ValidationError

ATTEMPT_STATUSES = ("pending", "success", "error")
WEBSITE_STATUSES = ("scraped", "processed", "cloned")
BENCHMARK_COMPLEXITIES = ("simple", "medium", "complex")

PROVIDER_SEPARATOR = "/"
UNKNOWN_PROVIDER = "unknown"

# One React component per default export.
COMPONENT_MARKER = "export default function"


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def utc_now() -> str:
    """Current time as a normalised ISO-8601 UTC string."""
    return normalise_timestamp(datetime.now(timezone.utc))


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into an aware datetime.

    Naive values are taken to be UTC.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"Invalid timestamp: {value!r}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def normalise_timestamp(value: str | datetime | None) -> str:
    """Return *value* as a UTC ISO string with microsecond precision.

    Every stored timestamp goes through here so that string order equals
    chronological order.  ``None`` means "now".
    """
    if value is None:
        value = datetime.now(timezone.utc)
    return parse_timestamp(value).isoformat(timespec="microseconds")


# ---------------------------------------------------------------------------
# Derivations
# ---------------------------------------------------------------------------

def derive_provider(model_used: str) -> str:
    """Return the namespace before the first ``/`` of a model identifier.

    >>> derive_provider("ollama/llama3.2:7b")
    'ollama'
    >>> derive_provider("customModel")
    'unknown'
    """
    if PROVIDER_SEPARATOR not in model_used:
        return UNKNOWN_PROVIDER
    return model_used.split(PROVIDER_SEPARATOR, 1)[0]


def count_components(code: str | None, marker: str = COMPONENT_MARKER) -> int:
    """Heuristic component count: non-overlapping occurrences of *marker*."""
    if not code:
        return 0
    return code.count(marker)


def byte_size(text: str | None) -> int:
    """UTF-8 encoded length of *text* (0 for ``None``)."""
    return len(text.encode("utf-8")) if text else 0


def content_metrics(markdown: str | None) -> tuple[int, int]:
    """Return ``(content_length, word_count)`` for scraped markdown.

    Word count is the number of spaces plus one, matching the generated
    columns of the SQLite schema.  Absent content yields ``(0, 0)``.
    """
    if markdown is None:
        return 0, 0
    return len(markdown), markdown.count(" ") + 1


def domain_of(url: str) -> str:
    """Host name of *url*, without port or credentials (empty when there is no scheme)."""
    return urlparse(url).hostname or ""


def check_text(**values: Optional[str]) -> None:
    """Raise :class:`ValidationError` if any value cannot be stored as UTF-8."""
    for name, value in values.items():
        if value is None:
            continue
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValidationError(f"{name} is not valid UTF-8 text") from exc


def _known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


# ---------------------------------------------------------------------------
# Websites
# ---------------------------------------------------------------------------

@dataclass
class NewWebsite:
    url: str
    title: str = ""
    description: Optional[str] = None
    markdown_content: Optional[str] = None
    html_content: Optional[str] = None
    screenshot_url: Optional[str] = None
    scraped_at: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    status: str = "scraped"

    def __post_init__(self) -> None:
        if not self.url or not self.url.strip():
            raise ValidationError("Website url must not be empty")
        check_text(
            url=self.url,
            title=self.title,
            description=self.description,
            markdown_content=self.markdown_content,
            html_content=self.html_content,
            screenshot_url=self.screenshot_url,
        )
        self.scraped_at = normalise_timestamp(self.scraped_at)


@dataclass
class Website:
    id: int
    url: str
    title: str
    description: Optional[str]
    markdown_content: Optional[str]
    html_content: Optional[str]
    screenshot_url: Optional[str]
    scraped_at: str
    metadata: dict[str, Any]
    status: str

    @classmethod
    def from_new(cls, website_id: int, new: NewWebsite) -> Website:
        return cls(
            id=website_id,
            url=new.url,
            title=new.title,
            description=new.description,
            markdown_content=new.markdown_content,
            html_content=new.html_content,
            screenshot_url=new.screenshot_url,
            scraped_at=new.scraped_at,  # type: ignore[arg-type]
            metadata=dict(new.metadata),
            status=new.status,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Website:
        values = _known_fields(cls, data)
        values.setdefault("title", "")
        values["metadata"] = dict(values.get("metadata") or {})
        for name in ("description", "markdown_content", "html_content", "screenshot_url"):
            values.setdefault(name, None)
        values.setdefault("status", "scraped")
        return cls(**values)


# ---------------------------------------------------------------------------
# Clone attempts
# ---------------------------------------------------------------------------

def check_attempt_fields(
    model_used: str,
    status: str,
    generation_time_ms: Optional[int],
    **text: Optional[str],
) -> None:
    """Raise :class:`ValidationError` for a malformed attempt.

    Keyword arguments name free-text fields that must be storable as UTF-8.
    """
    if not model_used or not model_used.strip():
        raise ValidationError("model_used is required")
    if status not in ATTEMPT_STATUSES:
        raise ValidationError(
            f"Unknown attempt status {status!r}; expected one of {ATTEMPT_STATUSES}"
        )
    if generation_time_ms is not None and generation_time_ms < 0:
        raise ValidationError("generation_time_ms must not be negative")
    check_text(model_used=model_used, **text)


@dataclass
class NewCloneAttempt:
    website_id: Optional[int]
    model_used: str
    generated_code: str = ""
    status: str = "pending"
    style_selected: Optional[str] = None
    additional_instructions: Optional[str] = None
    sandbox_url: Optional[str] = None
    error_message: Optional[str] = None
    generation_time_ms: Optional[int] = None
    created_at: Optional[str] = None

    def __post_init__(self) -> None:
        if self.website_id is None or self.website_id <= 0:
            raise ValidationError(
                f"Clone attempt needs a positive website_id, got {self.website_id!r}"
            )
        check_attempt_fields(
            self.model_used,
            self.status,
            self.generation_time_ms,
            generated_code=self.generated_code,
            style_selected=self.style_selected,
            additional_instructions=self.additional_instructions,
            sandbox_url=self.sandbox_url,
            error_message=self.error_message,
        )
        if self.generated_code is None:
            self.generated_code = ""
        self.created_at = normalise_timestamp(self.created_at)


@dataclass
class CloneAttempt:
    id: int
    website_id: int
    model_used: str
    provider: str
    style_selected: Optional[str]
    additional_instructions: Optional[str]
    generated_code: str
    sandbox_url: Optional[str]
    created_at: str
    status: str
    error_message: Optional[str]
    generation_time_ms: Optional[int]
    code_size_bytes: int
    component_count: int

    @classmethod
    def from_new(cls, attempt_id: int, new: NewCloneAttempt) -> CloneAttempt:
        return cls(
            id=attempt_id,
            website_id=new.website_id,  # type: ignore[arg-type]
            model_used=new.model_used,
            provider=derive_provider(new.model_used),
            style_selected=new.style_selected,
            additional_instructions=new.additional_instructions,
            generated_code=new.generated_code,
            sandbox_url=new.sandbox_url,
            created_at=new.created_at,  # type: ignore[arg-type]
            status=new.status,
            error_message=new.error_message,
            generation_time_ms=new.generation_time_ms,
            code_size_bytes=byte_size(new.generated_code),
            component_count=count_components(new.generated_code),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CloneAttempt:
        values = _known_fields(cls, data)
        for name in (
            "style_selected",
            "additional_instructions",
            "sandbox_url",
            "error_message",
            "generation_time_ms",
        ):
            values.setdefault(name, None)
        values["generated_code"] = values.get("generated_code") or ""
        values.setdefault("provider", derive_provider(values["model_used"]))
        values.setdefault("code_size_bytes", byte_size(values["generated_code"]))
        values.setdefault("component_count", count_components(values["generated_code"]))
        return cls(**values)


# ---------------------------------------------------------------------------
# Code files
# ---------------------------------------------------------------------------

@dataclass
class NewCodeFile:
    clone_attempt_id: int
    file_path: str
    file_content: str
    file_type: Optional[str] = None
    created_at: Optional[str] = None

    def __post_init__(self) -> None:
        if self.clone_attempt_id is None or self.clone_attempt_id <= 0:
            raise ValidationError("Code file needs a positive clone_attempt_id")
        if not self.file_path:
            raise ValidationError("file_path is required")
        self.created_at = normalise_timestamp(self.created_at)


@dataclass
class CodeFile:
    id: int
    clone_attempt_id: int
    file_path: str
    file_content: str
    file_type: Optional[str]
    created_at: str
    lines_of_code: int
    file_size_bytes: int

    @classmethod
    def from_new(cls, file_id: int, new: NewCodeFile) -> CodeFile:
        return cls(
            id=file_id,
            clone_attempt_id=new.clone_attempt_id,
            file_path=new.file_path,
            file_content=new.file_content,
            file_type=new.file_type,
            created_at=new.created_at,  # type: ignore[arg-type]
            lines_of_code=new.file_content.count("\n") + 1,
            file_size_bytes=byte_size(new.file_content),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CodeFile:
        return cls(**_known_fields(cls, data))


# ---------------------------------------------------------------------------
# Model benchmarks
# ---------------------------------------------------------------------------

@dataclass
class NewModelBenchmark:
    model_name: str
    provider: str
    website_complexity: str
    avg_generation_time_ms: float
    avg_code_quality_score: float
    success_rate: float
    avg_user_satisfaction: float
    total_attempts: int
    model_size: Optional[str] = None
    hardware_specs: dict[str, Any] = field(default_factory=dict)
    benchmark_date: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.model_name:
            raise ValidationError("model_name is required")
        if self.website_complexity not in BENCHMARK_COMPLEXITIES:
            raise ValidationError(
                f"Unknown complexity {self.website_complexity!r}; "
                f"expected one of {BENCHMARK_COMPLEXITIES}"
            )
        if self.benchmark_date is None:
            self.benchmark_date = datetime.now(timezone.utc).date().isoformat()


@dataclass
class ModelBenchmark:
    id: int
    model_name: str
    provider: str
    model_size: Optional[str]
    hardware_specs: dict[str, Any]
    website_complexity: str
    avg_generation_time_ms: float
    avg_code_quality_score: float
    success_rate: float
    avg_user_satisfaction: float
    total_attempts: int
    benchmark_date: str
    notes: Optional[str]

    @classmethod
    def from_new(cls, benchmark_id: int, new: NewModelBenchmark) -> ModelBenchmark:
        return cls(id=benchmark_id, **asdict(new))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelBenchmark:
        values = _known_fields(cls, data)
        values["hardware_specs"] = dict(values.get("hardware_specs") or {})
        return cls(**values)


# ---------------------------------------------------------------------------
# Snapshots and aggregates
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Snapshot:
    """An immutable copy of both collections, read under one lock."""

    websites: tuple[Website, ...] = ()
    attempts: tuple[CloneAttempt, ...] = ()


@dataclass
class ModelStats:
    total_attempts: int
    success_rate: float
    avg_generation_time_ms: float
    avg_code_size_bytes: float
    last_used: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ModelSummary:
    model_name: str
    provider: str
    total_attempts: int
    success_rate: float
    avg_generation_time: float
    avg_code_size: float
    last_used: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ProviderComparison:
    provider: str
    total_attempts: int
    success_rate: float
    avg_generation_time: float
    avg_code_size: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class WebsiteComplexity:
    website_id: int
    domain: str
    title: str
    word_count: int
    content_length: int
    clone_attempts: int
    avg_generation_time: Optional[float]
    avg_code_size: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
