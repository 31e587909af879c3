LIKE_ESCAPE = "\\"


def contains_pattern(q: str) -> str:
    """Case-folded `%q%` LIKE pattern with the user's `%` and `_` taken literally."""
    term = q.strip().lower()
    term = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{term}%"
