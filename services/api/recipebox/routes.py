# Client-side routes handed back as navigation hints
HOME_ROUTE = "/"
RECIPES_ROUTE = "/recipes"


def edit_route(index: int) -> str:
    return f"/edit-recipe/{index}"
