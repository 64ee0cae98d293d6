"""Static component category taxonomy for Bit BlazorUI."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from blazorseek.models import ComponentCategory

logger = logging.getLogger(__name__)

COMPONENT_PREFIX = "Bit"
FALLBACK_CATEGORY = "Utilities"

# (name, title, description, members), in display order
_KNOWN_CATEGORIES: list[tuple[str, str, str, tuple[str, ...]]] = [
    ("Buttons", "Buttons", "Interactive button components", (
        "BitButton", "BitButtonGroup", "BitMenuButton", "BitToggleButton", "BitActionButton",
    )),
    ("Inputs", "Inputs", "Form input and control components", (
        "BitTextField", "BitNumberField", "BitSearchBox", "BitCheckbox", "BitChoiceGroup",
        "BitDropdown", "BitToggle", "BitSlider", "BitRating", "BitDatePicker",
        "BitTimePicker", "BitDateRangePicker", "BitColorPicker", "BitFileUpload",
        "BitOtpInput", "BitCircularTimePicker",
    )),
    ("Navs", "Navs", "Navigation components", (
        "BitNav", "BitNavBar", "BitBreadcrumb", "BitPagination", "BitPivot",
    )),
    ("Surfaces", "Surfaces", "Surface and container components", (
        "BitAccordion", "BitCard", "BitDialog", "BitModal", "BitPanel",
        "BitTooltip", "BitCallout", "BitPopover", "BitScrollablePane",
    )),
    ("Notifications", "Notifications", "Notification and feedback components", (
        "BitMessageBar", "BitSnackBar", "BitBadge", "BitPersona", "BitTag",
    )),
    ("Lists", "Lists", "List and data display components", (
        "BitBasicList", "BitTimeline", "BitCarousel", "BitSwiper",
    )),
    ("Layouts", "Layouts", "Layout and structure components", (
        "BitGrid", "BitStack", "BitSpacer", "BitSeparator", "BitHeader",
        "BitFooter", "BitLayout",
    )),
    ("Progress", "Progress", "Progress and loading indicators", (
        "BitProgress", "BitLoading", "BitShimmer",
    )),
    ("Utilities", "Utilities", "Utility components and helpers", (
        "BitIcon", "BitImage", "BitLink", "BitText", "BitLabel",
        "BitElement", "BitOverlay", "BitStickyHeader",
    )),
    ("Extras", "Extras", "Additional components and extensions", (
        "BitChart", "BitDataGrid", "BitPdfReader",
    )),
]

# Substring rules evaluated in order against the lower-cased, unprefixed name.
# An unmapped "...DataGrid" lands in Notifications ("datagrid" contains "tag");
# explicitly mapped names never reach inference.
_INFERENCE_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("Buttons", ("button",)),
    ("Inputs", (
        "textfield", "numberfield", "searchbox", "checkbox", "choicegroup", "dropdown",
        "toggle", "slider", "rating", "picker", "fileupload", "otpinput",
    )),
    ("Navs", ("nav", "navbar", "breadcrumb", "pagination", "pivot")),
    ("Surfaces", (
        "accordion", "card", "dialog", "modal", "panel", "tooltip",
        "callout", "popover", "scrollablepane",
    )),
    ("Notifications", ("messagebar", "snackbar", "badge", "persona", "tag")),
    ("Lists", ("basiclist", "timeline", "carousel", "swiper")),
    ("Layouts", ("grid", "stack", "spacer", "separator", "header", "footer", "layout")),
    ("Progress", ("progress", "loading", "shimmer")),
    ("Extras", ("chart", "datagrid", "pdfreader")),
    ("Utilities", (
        "icon", "image", "link", "text", "label", "element", "overlay", "stickyheader",
    )),
]


def strip_prefix(name: str) -> str:
    """Drop the library's component prefix (``BitButton`` -> ``Button``)."""
    if name.startswith(COMPONENT_PREFIX):
        return name[len(COMPONENT_PREFIX):]
    return name


def _require_name(value: str, what: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"{what} must not be empty")


class CategoryMapper:
    """Maps components to their categories.

    The category list is fixed; ``initialize`` fills it once and later calls
    are no-ops.
    """

    def __init__(self) -> None:
        self._categories: list[ComponentCategory] = []
        self._category_map: dict[str, ComponentCategory] = {}
        self._lock = threading.Lock()
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, repository_path: Path | str | None = None) -> None:
        with self._lock:
            if self._initialized:
                return
            for name, title, description, members in _KNOWN_CATEGORIES:
                self._add_category(name, title, description, members)
            self._initialized = True
        logger.info("Category mapper initialized with %d categories", len(self._categories))

    def _add_category(
        self, name: str, title: str, description: str, members: tuple[str, ...]
    ) -> None:
        category = ComponentCategory(
            name=name, title=title, description=description, component_names=members,
        )
        self._categories.append(category)
        for component in members:
            self._category_map[component.lower()] = category

    def get_categories(self) -> list[ComponentCategory]:
        return list(self._categories)

    def get_category_for_component(self, component_name: str) -> ComponentCategory | None:
        _require_name(component_name, "component_name")
        return self._category_map.get(component_name.lower())

    def get_category_name(self, component_name: str) -> str | None:
        category = self.get_category_for_component(component_name)
        return category.name if category else None

    def get_components_in_category(self, category_name: str) -> list[str]:
        """Member names of the category whose name or title matches."""
        _require_name(category_name, "category_name")
        wanted = category_name.lower()
        for category in self._categories:
            if category.name.lower() == wanted or category.title.lower() == wanted:
                return list(category.component_names)
        return []

    def infer_category_from_name(self, component_name: str) -> str:
        """Best-effort category from name patterns. Always returns a category."""
        _require_name(component_name, "component_name")
        base = strip_prefix(component_name).lower()
        for category, needles in _INFERENCE_RULES:
            if any(n in base for n in needles):
                return category
        return FALLBACK_CATEGORY
