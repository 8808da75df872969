"""Pydantic models for slide records and the intermediate slide structure.

`SlideRecord` is the unit of output handed to downstream consumers (player,
narration sync, video export). `SlideGeometry`, `SlideTextStyle`,
`SlideTextElement` and `SlideInfo` are transient per-slide values recovered
from slide XML to drive synthetic rendering.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# 914400 EMU = 1 inch
EMU_PER_INCH = 914400


class SlideRecord(BaseModel):
    """A single slide of the output slideshow."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Stable identifier, 'slide-<n>'")
    image_url: str = Field(min_length=1, description="Self-contained data URI")
    start_time: float = Field(default=0.0, ge=0, description="Start time in seconds")
    duration: float = Field(default=10.0, ge=0, description="Duration in seconds")
    text: str = ""
    slide_number: int = Field(ge=1, description="1-based position in the slide manifest")

    @classmethod
    def for_slide(
        cls,
        slide_number: int,
        image_url: str,
        text: str = "",
        duration: float = 10.0,
    ) -> "SlideRecord":
        """Build a record with the default timing for its manifest position."""
        return cls(
            id=f"slide-{slide_number}",
            image_url=image_url,
            start_time=(slide_number - 1) * duration,
            duration=duration,
            text=text,
            slide_number=slide_number,
        )

    def to_dict(self) -> dict:
        """Serialize with camelCase keys (imageUrl, startTime, slideNumber)."""
        return self.model_dump(by_alias=True)


class SlideGeometry(BaseModel):
    """Position and size of a text element, in EMU."""

    x: int = 100
    y: int = 100
    width: int = 800
    height: int = 100

    @property
    def inches(self) -> tuple[float, float, float, float]:
        return (
            self.x / EMU_PER_INCH,
            self.y / EMU_PER_INCH,
            self.width / EMU_PER_INCH,
            self.height / EMU_PER_INCH,
        )


class SlideTextStyle(BaseModel):
    """Text style recovered from run properties."""

    font_size: float = Field(default=32, description="Font size in points")
    color: str = Field(default="#1e293b", description="Hex RGB color")
    font_family: str = "Arial"


class SlideTextElement(BaseModel):
    """One non-empty paragraph with its layout and style."""

    text: str
    position: SlideGeometry = Field(default_factory=SlideGeometry)
    style: SlideTextStyle = Field(default_factory=SlideTextStyle)
    is_title: bool = False


class SlideInfo(BaseModel):
    """Structure recovered from one slide, used for synthetic rendering."""

    background: str = "#ffffff"
    title: str = ""
    content: list[str] = Field(default_factory=list)
    text_elements: list[SlideTextElement] = Field(default_factory=list)


class ConversionResult(BaseModel):
    """Outcome of a high-fidelity whole-deck conversion.

    Either an ordered list of per-slide images, or an explicit
    unavailability signal. `combined` marks the case where the rasterizer
    flattened every slide into one image.
    """

    available: bool = True
    images: list[str] = Field(default_factory=list, description="Data URIs in slide order")
    texts: list[str] = Field(
        default_factory=list,
        description="Optional per-page text, aligned with images",
    )
    combined: bool = False
    method: str = ""

    @classmethod
    def unavailable(cls, method: str = "") -> "ConversionResult":
        return cls(available=False, method=method)

    @property
    def usable(self) -> bool:
        return self.available and not self.combined and bool(self.images)
