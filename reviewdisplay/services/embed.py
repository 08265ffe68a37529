"""Generation of the self-contained embed script served to third-party pages."""

from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader

from reviewdisplay.models.widget import Widget
from reviewdisplay.schemas.embed import EmbedData, EmbedWidgetConfig
from reviewdisplay.schemas.review import PlaceSummary, ReviewOut
from reviewdisplay.services.preview import select_reviews
from reviewdisplay.services.reviews import PlaceInfo

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

SCRIPT_TEMPLATE = "embed/widget.js"
WIDGET_NOT_FOUND_SCRIPT = "console.error('ReviewWidget: Widget not found');"
DEFAULT_HOST = "localhost:8000"

_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=False,
    keep_trailing_newline=True,
)


def build_base_url(host: Optional[str], forwarded_proto: Optional[str]) -> str:
    protocol = forwarded_proto or "http"
    return f"{protocol}://{host or DEFAULT_HOST}"


def generate_widget_script(widget_id: str, base_url: str) -> str:
    template = _environment.get_template(SCRIPT_TEMPLATE)
    return template.render(
        widget_id=widget_id,
        data_url=f"{base_url.rstrip('/')}/embed/data/{widget_id}",
    )


def build_embed_data(widget: Widget, place_info: PlaceInfo) -> EmbedData:
    reviews: List[ReviewOut] = [
        ReviewOut.model_validate(review)
        for review in select_reviews(place_info.reviews, widget.min_rating, widget.max_reviews)
    ]
    return EmbedData(
        widget=EmbedWidgetConfig.model_validate(widget),
        place=PlaceSummary(
            name=place_info.name,
            rating=place_info.rating,
            total_reviews=place_info.total_reviews,
        ),
        reviews=reviews,
        warning=place_info.warning,
    )
