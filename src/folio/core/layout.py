"""Grid layout selection for category listings."""


def layout_class(count: int) -> str:
    """Pick a CSS layout class for a grid of ``count`` items.

    Small grids are justified, six items go in three columns, and larger
    grids use four columns when that leaves a reasonably full last row,
    five otherwise.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    if count <= 5:
        return "justify"
    if count == 6:
        return "category-layout-3"
    if count % 4 == 0 or (count % 4 > 2 and count % 5 != 0):
        return "category-layout-4"
    return "category-layout-5"
