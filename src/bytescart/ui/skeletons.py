"""
Loading skeletons.

Static placeholder markup shown while a dashboard or storefront page fetches
its data. Blocks are pulsing grey boxes sized like the content they stand in
for; nothing here depends on request data.
"""


def _box(classes: str) -> str:
    return f'<div class="{classes}"></div>'


def _wrap(classes: str, *children: str) -> str:
    return f'<div class="{classes}">{"".join(children)}</div>'


def _repeat(count: int, markup: str) -> str:
    return markup * count


def _page_header(title_width: str, subtitle_width: str) -> str:
    return _wrap(
        "",
        _box(f"h-8 {title_width} bg-gray-200 rounded-lg"),
        _box(f"h-4 {subtitle_width} bg-gray-100 rounded mt-2"),
    )


def _header_with_button(title_width: str, subtitle_width: str, button_width: str) -> str:
    return _wrap(
        "flex items-center justify-between",
        _page_header(title_width, subtitle_width),
        _box(f"h-10 {button_width} bg-gray-200 rounded-xl"),
    )


def _card(*children: str, extra: str = "p-6") -> str:
    return _wrap(f"bg-white rounded-2xl {extra} border border-gray-100", *children)


def dashboard_skeleton() -> str:
    stat_card = _card(
        _wrap(
            "flex items-start justify-between",
            _wrap(
                "space-y-3",
                _box("h-4 w-24 bg-gray-100 rounded"),
                _box("h-10 w-16 bg-gray-200 rounded"),
                _box("h-3 w-20 bg-gray-100 rounded"),
            ),
            _box("h-14 w-14 bg-gray-200 rounded-2xl"),
        )
    )
    quick_actions = _card(
        _box("h-5 w-28 bg-gray-200 rounded mb-5"),
        _wrap("space-y-3", _repeat(3, _box("h-16 bg-gray-50 rounded-xl"))),
    )
    recent_products = _card(
        _box("h-5 w-32 bg-gray-200 rounded mb-5"),
        _wrap("space-y-3", _repeat(5, _box("h-14 bg-gray-50 rounded-xl"))),
    )
    return _wrap(
        "space-y-8 animate-pulse",
        _header_with_button("w-48", "w-64", "w-36"),
        _wrap("grid grid-cols-1 md:grid-cols-3 gap-6", _repeat(3, stat_card)),
        _wrap("grid grid-cols-1 lg:grid-cols-2 gap-6", quick_actions, recent_products),
    )


def payments_skeleton() -> str:
    return _wrap(
        "space-y-6 animate-pulse",
        _page_header("w-28", "w-56"),
        _card(
            _box("h-6 w-40 bg-gray-200 rounded"),
            _wrap(
                "grid grid-cols-1 md:grid-cols-3 gap-4",
                _repeat(3, _box("h-24 bg-gray-50 rounded-xl")),
            ),
            _box("h-48 bg-gray-50 rounded-xl mt-4"),
            extra="p-6 space-y-4",
        ),
    )


def products_skeleton() -> str:
    product_card = _card(
        _box("h-48 bg-gray-200"),
        _wrap(
            "p-4 space-y-2",
            _box("h-4 w-3/4 bg-gray-200 rounded"),
            _box("h-4 w-1/4 bg-gray-100 rounded"),
        ),
        extra="overflow-hidden",
    )
    return _wrap(
        "space-y-6 animate-pulse",
        _header_with_button("w-32", "w-48", "w-32"),
        _wrap(
            "grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-3 gap-6",
            _repeat(6, product_card),
        ),
    )


def settings_skeleton() -> str:
    field = _wrap(
        "space-y-2",
        _box("h-4 w-32 bg-gray-200 rounded"),
        _box("h-10 w-full bg-gray-100 rounded-lg"),
    )
    return _wrap(
        "space-y-8 animate-pulse",
        _page_header("w-28", "w-56"),
        _wrap(
            "flex gap-2 border-b border-gray-200 pb-2",
            _repeat(5, _box("h-9 w-24 bg-gray-100 rounded-lg")),
        ),
        _card(_repeat(4, field), extra="p-6 space-y-4"),
    )


def themes_skeleton() -> str:
    theme_card = _card(
        _wrap(
            "flex gap-3 mb-4",
            _box("h-8 w-8 bg-gray-200 rounded-full"),
            _box("h-8 w-8 bg-gray-100 rounded-full"),
        ),
        _box("h-5 w-24 bg-gray-200 rounded mb-2"),
        _box("h-4 w-32 bg-gray-100 rounded"),
    )
    return _wrap(
        "space-y-6 animate-pulse",
        _page_header("w-24", "w-48"),
        _wrap(
            "grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-3 gap-6",
            _repeat(6, theme_card),
        ),
    )


def storefront_skeleton() -> str:
    trust_item = _wrap(
        "flex items-center gap-3 justify-center",
        _box("h-5 w-5 bg-muted rounded"),
        _box("h-4 w-32 bg-muted rounded"),
    )
    product_tile = _wrap(
        "border border-border bg-background overflow-hidden",
        _box("aspect-[3/4] bg-muted"),
        _wrap(
            "p-4 sm:p-5 space-y-2",
            _box("h-4 w-3/4 bg-muted rounded"),
            _box("h-4 w-1/4 bg-muted rounded"),
        ),
    )
    container = "max-w-[1200px] mx-auto px-4 sm:px-6"
    return _wrap(
        "min-h-screen bg-background animate-pulse",
        _box("h-[calc(100vh-64px)] sm:h-[calc(100vh-72px)] bg-muted"),
        _wrap(
            "border-b border-border py-8 sm:py-10",
            _wrap(
                container,
                _wrap("grid grid-cols-1 sm:grid-cols-3 gap-6 sm:gap-8", _repeat(3, trust_item)),
            ),
        ),
        _wrap(
            "py-16 sm:py-20 lg:py-24",
            _wrap(
                container,
                _wrap(
                    "mb-10 sm:mb-12",
                    _box("h-3 w-16 bg-muted rounded mb-2"),
                    _box("h-8 w-48 bg-muted rounded"),
                ),
                _wrap("grid grid-cols-2 lg:grid-cols-4 gap-4 sm:gap-6", _repeat(4, product_tile)),
            ),
        ),
    )


def product_skeleton() -> str:
    return _wrap(
        "min-h-screen bg-background animate-pulse",
        _wrap(
            "max-w-[1200px] mx-auto px-4 sm:px-6 py-8 sm:py-12",
            _box("h-4 w-32 bg-muted rounded mb-8"),
            _wrap(
                "grid grid-cols-1 lg:grid-cols-2 gap-8 lg:gap-16",
                _box("aspect-square bg-muted rounded"),
                _wrap(
                    "space-y-6",
                    _box("h-8 w-3/4 bg-muted rounded"),
                    _box("h-6 w-1/4 bg-muted rounded"),
                    _wrap(
                        "space-y-2",
                        _box("h-4 w-full bg-muted rounded"),
                        _box("h-4 w-5/6 bg-muted rounded"),
                        _box("h-4 w-2/3 bg-muted rounded"),
                    ),
                    _box("h-12 w-full bg-muted rounded"),
                ),
            ),
        ),
    )


SKELETONS = {
    "dashboard": dashboard_skeleton,
    "payments": payments_skeleton,
    "products": products_skeleton,
    "settings": settings_skeleton,
    "themes": themes_skeleton,
    "storefront": storefront_skeleton,
    "product": product_skeleton,
}


def render_skeleton(section: str) -> str | None:
    """Placeholder markup for a page section, or None if the section is unknown."""
    builder = SKELETONS.get(section)
    return builder() if builder else None
