def filter_menu(items: list[dict], term: str = "", category: str = "all") -> list[dict]:
    """Search box plus category buttons from the menu page."""
    term = (term or "").strip().lower()
    category = category or "all"
    return [
        i for i in items
        if (not term or term in (i.get("name") or "").lower())
        and (category == "all" or i.get("category") == category)
    ]
