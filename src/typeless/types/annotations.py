from typing import Annotated, Any, get_args, get_origin


def unwrap(annotation: Any) -> Any:
    """Strip ``Annotated`` wrappers, returning the bare type."""
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation
