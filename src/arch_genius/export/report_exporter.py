from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Mapping

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen.canvas import Canvas

from arch_genius.core.constants import PRODUCT_LABEL
from arch_genius.schemas.plan import PlanOption
from arch_genius.utilities.utilities import Utilities


logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS: dict[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    media_type: str

    def save(self, directory: Path) -> Path:
        path: Path = directory / self.filename
        Utilities.write_bytes(path, self.content)
        return path


@dataclass(frozen=True)
class ImagePlacement:
    page: int
    x_mm: float
    top_mm: float
    width_mm: float
    height_mm: float


@dataclass
class ReportLayout:
    """Where things landed in a generated report. Positions are mm from the top-left corner."""
    page_count: int = 1
    headings: list[tuple[str, int, float]] = field(default_factory=list)
    image: ImagePlacement | None = None
    room_lines: list[tuple[str, int, float]] = field(default_factory=list)


class _PageWriter:
    """Top-down cursor over a reportlab canvas, measured in mm like the page layout."""

    def __init__(self, canvas: Canvas, page_width_mm: float, page_height_mm: float, margin_mm: float) -> None:
        self.canvas = canvas
        self.page_width_mm = page_width_mm
        self.page_height_mm = page_height_mm
        self.margin_mm = margin_mm
        self.y_mm: float = margin_mm
        self.layout = ReportLayout()

    @property
    def content_width_mm(self) -> float:
        return self.page_width_mm - 2 * self.margin_mm

    @property
    def bottom_mm(self) -> float:
        return self.page_height_mm - self.margin_mm

    def new_page(self) -> None:
        self.canvas.showPage()
        self.layout.page_count += 1
        self.y_mm = self.margin_mm

    def ensure_room(self, needed_mm: float) -> None:
        # a fresh page is never skipped; nothing would fit better on the next one
        if self.y_mm > self.margin_mm and self.y_mm + needed_mm > self.bottom_mm:
            self.new_page()

    def _baseline(self, y_mm: float) -> float:
        return (self.page_height_mm - y_mm) * mm

    def text(self, text: str, font_size: float, gray: float = 0.0, font_name: str = "Helvetica") -> None:
        # showPage() resets the graphics state, so the font is set on every draw
        self.canvas.setFont(font_name, font_size)
        self.canvas.setFillGray(gray)
        self.canvas.drawString(self.margin_mm * mm, self._baseline(self.y_mm), text)

    def title(self, text: str) -> None:
        self.canvas.setFont("Helvetica-Bold", 22)
        self.canvas.setFillColorRGB(15 / 255, 23 / 255, 42 / 255)
        self.canvas.drawString(self.margin_mm * mm, self._baseline(self.y_mm), text)

    def rule(self, y_mm: float) -> None:
        self.canvas.setStrokeGray(200 / 255)
        self.canvas.line(
            self.margin_mm * mm,
            self._baseline(y_mm),
            (self.page_width_mm - self.margin_mm) * mm,
            self._baseline(y_mm),
        )

    def heading(self, title: str, body_line_mm: float = 5) -> None:
        # a heading never ends a page on its own
        self.ensure_room(7 + body_line_mm)
        self.text(title, 14, gray=0.0, font_name="Helvetica-Bold")
        self.layout.headings.append((title, self.layout.page_count, self.y_mm))
        self.y_mm += 7

    def paragraph(self, body: str, font_size: float = 11, line_height_mm: float = 5) -> None:
        lines: list[str] = []
        for block in body.splitlines() or [""]:
            lines.extend(simpleSplit(block, "Helvetica", font_size, self.content_width_mm * mm) or [""])
        for line in lines:
            self.ensure_room(line_height_mm)
            self.text(line, font_size, gray=60 / 255)
            self.y_mm += line_height_mm
        self.y_mm += 10

    def image(self, reader: ImageReader) -> None:
        pixel_width, pixel_height = reader.getSize()
        width_mm: float = self.content_width_mm
        height_mm: float = pixel_height * width_mm / pixel_width
        max_height_mm: float = self.bottom_mm - self.margin_mm
        if height_mm > max_height_mm:
            width_mm *= max_height_mm / height_mm
            height_mm = max_height_mm

        self.ensure_room(height_mm)
        self.canvas.drawImage(
            reader,
            self.margin_mm * mm,
            self._baseline(self.y_mm + height_mm),
            width=width_mm * mm,
            height=height_mm * mm,
        )
        self.layout.image = ImagePlacement(
            page=self.layout.page_count,
            x_mm=self.margin_mm,
            top_mm=self.y_mm,
            width_mm=width_mm,
            height_mm=height_mm,
        )
        self.y_mm += height_mm + 15


class ReportExporter:
    """
    Builds the downloadable artifacts for one plan.

    Nothing here touches the plan session: the exporter only reads the plan and a snapshot
    of the sketch cache.
    """

    margin_mm: float = 20
    room_section_reserve_mm: float = 60
    room_line_height_mm: float = 6

    def __init__(self, product_label: str = PRODUCT_LABEL, page_size: tuple[float, float] = A4) -> None:
        self.product_label = product_label
        self.page_size = page_size

    def image_artifact(self, plan: PlanOption, visualizations: Mapping[int, str]) -> ExportArtifact | None:
        image_uri: str | None = visualizations.get(plan.id)
        if image_uri is None:
            return None

        mime_type, content = Utilities.decode_data_uri(image_uri)
        extension: str = IMAGE_EXTENSIONS.get(mime_type, "png")
        return ExportArtifact(filename=f"{plan.file_stem}_Plan.{extension}", content=content, media_type=mime_type)

    def pdf_artifact(self, plan: PlanOption, visualizations: Mapping[int, str]) -> ExportArtifact:
        content, _ = self.render_pdf(plan, visualizations.get(plan.id))
        return ExportArtifact(filename=f"{plan.file_stem}_Blueprint.pdf", content=content, media_type="application/pdf")

    def render_pdf(self, plan: PlanOption, image_uri: str | None = None) -> tuple[bytes, ReportLayout]:
        buffer = BytesIO()
        canvas = Canvas(buffer, pagesize=self.page_size)
        canvas.setTitle(plan.name)
        canvas.setAuthor(self.product_label)

        page_width, page_height = self.page_size
        writer = _PageWriter(canvas, page_width / mm, page_height / mm, self.margin_mm)

        writer.title(plan.name)
        writer.y_mm += 10
        writer.text(self.product_label, 12, gray=100 / 255)
        writer.y_mm += 15
        writer.rule(writer.y_mm - 5)

        writer.heading("Design Concept")
        writer.paragraph(plan.concept)

        writer.heading("Layout Details")
        writer.paragraph(plan.layout_description)

        if image_uri is not None:
            try:
                _, image_bytes = Utilities.decode_data_uri(image_uri)
                writer.image(ImageReader(BytesIO(image_bytes)))
            except Exception:
                logger.exception("Error adding sketch of plan %s to PDF; continuing without it.", plan.id)

        if writer.y_mm > writer.page_height_mm - self.room_section_reserve_mm:
            writer.new_page()

        writer.heading("Room Dimensions", body_line_mm=3 + self.room_line_height_mm)
        writer.y_mm += 3
        for room in plan.room_sizes:
            if writer.y_mm > writer.bottom_mm:
                writer.new_page()
            line: str = f"{room.room}: {room.area}"
            writer.text(line, 11, gray=60 / 255)
            writer.layout.room_lines.append((line, writer.layout.page_count, writer.y_mm))
            writer.y_mm += self.room_line_height_mm

        canvas.save()
        return buffer.getvalue(), writer.layout
