import logging

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

log = logging.getLogger(__name__)


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON while keeping snake_case attributes.

    Notes:
        1. Input is accepted under either the camelCase alias or the field name.
        2. FastAPI serializes response models by alias, so JSON output is camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiError(BaseModel):
    """Body of every error response.

    Attributes:
        message (str): Human readable description of the failure.

    Notes:
        1. The HTTP status travels in the response status line, never in the body.
    """

    message: str


def strip_not_blank(value: str) -> str:
    """Strip a required text field, rejecting values made only of whitespace."""
    if not value.strip():
        raise ValueError("Name cannot be blank")
    return value.strip()
