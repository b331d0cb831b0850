from datetime import timedelta

from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str = "travel-cms"
    rules_version: str = "1"


class RangeRule(BaseModel):
    min: int
    max: int


class RegexRule(RangeRule):
    pattern: str


class ContentRules(BaseModel):
    slug: RegexRule = RegexRule(pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$", min=1, max=200)
    title: RangeRule = RangeRule(min=1, max=200)
    block_name: RangeRule = RangeRule(min=1, max=120)


class SchedulingRules(BaseModel):
    interval_minutes: float = Field(default=5, gt=0)
    max_scheduled_days_ahead: int = Field(default=365, gt=0)
    upcoming_window_hours: int = Field(default=24, gt=0)
    store_timeout_seconds: float = Field(default=10, gt=0)
    autostart: bool = False

    @property
    def max_schedule_ahead(self) -> timedelta:
        return timedelta(days=self.max_scheduled_days_ahead)

    @property
    def upcoming_window(self) -> timedelta:
        return timedelta(hours=self.upcoming_window_hours)


class SanitizerRules(BaseModel):
    allow_tags: list[str] = Field(
        default_factory=lambda: [
            "p", "br", "h2", "h3", "h4", "blockquote", "ul", "ol", "li",
            "strong", "b", "em", "i", "u", "a", "img",
        ]
    )
    allow_attrs: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "a": ["href", "title"],
            "img": ["src", "alt", "title", "width", "height"],
        }
    )
    drop_content_tags: list[str] = Field(
        default_factory=lambda: [
            "script", "style", "iframe", "object", "embed", "noscript", "template",
        ]
    )
    forbid_protocols: list[str] = Field(
        default_factory=lambda: ["javascript:", "data:", "vbscript:"]
    )
    add_noopener: bool = True
    add_noreferrer: bool = True


class RenderRules(BaseModel):
    default_cta_background: str = "#3B82F6"
    default_faq_title: str = "Frequently Asked Questions"
    sanitize_text: bool = True
    sanitizer: SanitizerRules = SanitizerRules()


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    data_dir_env: str = "TRAVEL_CMS_DATA_DIR"
    db_filename: str = "travel_cms.db"


class LoggingRules(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Rules(BaseModel):
    project: ProjectRules = ProjectRules()
    content: ContentRules = ContentRules()
    scheduling: SchedulingRules = SchedulingRules()
    render: RenderRules = RenderRules()
    ops: OpsRules = OpsRules()
    logging: LoggingRules = LoggingRules()
