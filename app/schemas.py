from typing import ClassVar, Tuple

from flask import request
from pydantic import BaseModel, ConfigDict, ValidationError

from app.errors import bad_request


class RequestModel(BaseModel):
    """Base for request bodies; unknown keys are rejected."""

    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)


class PatchModel(RequestModel):
    """Partial update body: every field optional, only the sent ones apply.

    Fields listed in ``not_null`` may be omitted but not sent as null.
    """

    not_null: ClassVar[Tuple[str, ...]] = ()

    def changes(self):
        data = self.model_dump(exclude_unset=True)
        if not data:
            raise bad_request('No fields provided to update.')
        nulls = [field for field in self.not_null if field in data and data[field] is None]
        if nulls:
            raise bad_request(f'{", ".join(nulls)} cannot be null.')
        return data


def _format_error(error):
    location = '.'.join(str(part) for part in error['loc'])
    if location:
        return f'{location}: {error["msg"]}'
    return error['msg']


def validate_body(model):
    """Parse the JSON body of the current request into ``model``.

    Raises a BadRequest ApiError listing every validation problem.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise bad_request('Request body must be a JSON object.')

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise bad_request(', '.join(_format_error(err) for err in e.errors()))
