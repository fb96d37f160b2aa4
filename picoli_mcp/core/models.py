"""Input shapes shared by the config loader and the tool signatures."""
from typing import Annotated, Optional

from pydantic import AfterValidator, AnyUrl, BaseModel, Field, StringConstraints, TypeAdapter, ValidationError

_URL_ADAPTER = TypeAdapter(AnyUrl)


def validate_absolute_url(value: str) -> str:
    """Reject anything that is not an absolute URL; return the value untouched."""
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError(f"Invalid URL: {value!r}") from None
    return value


# Kept as `str` so the destination is forwarded exactly as the caller wrote it.
AbsoluteUrl = Annotated[str, AfterValidator(validate_absolute_url)]

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

DateString = Annotated[str, StringConstraints(pattern=DATE_PATTERN)]

MAX_BATCH = 500


class LinkInput(BaseModel):
    url: AbsoluteUrl = Field(..., description="The destination URL")
    slug: Optional[str] = Field(default=None, description="Optional custom slug")

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)
